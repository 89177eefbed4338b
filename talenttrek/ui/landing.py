"""
Marketing copy for the public landing page.
"""

from talenttrek.schemas.schemas import CallToAction, Feature, HomePage, Testimonial


STUDENT_FEATURES = [
    Feature(
        title="Smart job search",
        description="Search every open role by title, company, location or keyword and see at a glance where you have already applied."
    ),
    Feature(
        title="One-click applications",
        description="Apply with the resume on your profile and an optional cover letter, then track every status in one place."
    ),
    Feature(
        title="Interview preparation",
        description="Generate interview questions with model answers for any job title before the big day."
    ),
]

RECRUITER_FEATURES = [
    Feature(
        title="Company profiles",
        description="Create and manage profiles for every company you hire for."
    ),
    Feature(
        title="Post jobs in minutes",
        description="Publish openings with requirements, salary and location under any of your companies."
    ),
    Feature(
        title="Applicant pipeline",
        description="Review applicants, move them to interview, accept or reject, all from one dashboard."
    ),
]

TESTIMONIALS = [
    Testimonial(
        name="Sarah Johnson",
        role="UX Designer at TechVision",
        quote="The AI resume feedback was a game-changer. After implementing the suggestions, I got callbacks from 4 companies within a week and landed my dream job with a 35% salary increase!",
        audience="student"
    ),
    Testimonial(
        name="Michael Rodriguez",
        role="Data Analyst at FinScope",
        quote="As a career changer, TalentTrek's job matching highlighted roles aligning with my transferable skills. The recommendations were spot on!",
        audience="student"
    ),
    Testimonial(
        name="Emma Chen",
        role="Marketing Associate at BrandWave",
        quote="As a recent graduate, TalentTrek's AI feedback helped me quantify my internships and coursework. I got multiple interviews within days!",
        audience="student"
    ),
    Testimonial(
        name="Jennifer Thompson",
        role="HR Director at Quantum Solutions",
        quote="TalentTrek's AI matching cut our time-to-hire by 50%. Pre-qualified candidates are delivered straight to us. It's a game-changer!",
        audience="recruiter"
    ),
    Testimonial(
        name="David Wilson",
        role="CEO at CreativeEdge Studio",
        quote="As a small business owner, TalentTrek simplifies finding qualified candidates fast. The AI matching ensures perfect cultural fits.",
        audience="recruiter"
    ),
    Testimonial(
        name="Alisha Patel",
        role="Tech Recruiter at InnovateTech",
        quote="The AI understands nuanced skill needs, delivering top candidates. We've reduced bad hires by 80%!",
        audience="recruiter"
    ),
]


def home_page() -> HomePage:
    return HomePage(
        headline="TalentTrek helps job seekers find the right opportunities and empowers recruiters to connect with top talent.",
        tagline="Get AI-powered resume feedback and apply with confidence.",
        calls_to_action=[
            CallToAction(label="Find Jobs", href="/signin"),
            CallToAction(label="Post a Job", href="/signin"),
        ],
        student_features=STUDENT_FEATURES,
        recruiter_features=RECRUITER_FEATURES,
        testimonials=TESTIMONIALS,
    )
