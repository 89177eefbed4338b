"""
TalentTrek
A job board connecting students with recruiters.

Architecture:
- SQL database (PostgreSQL, or SQLite for local runs): users, companies, jobs, applications
- MongoDB GridFS: uploaded resumes and profile photos
- DeepSeek AI: interview question generation only
"""

__version__ = "1.0.0"
