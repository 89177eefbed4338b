"""
Layout shells for the student and recruiter areas: navigation items and
breadcrumbs derived from the request path.
"""

from typing import List

from talenttrek.schemas.schemas import Breadcrumb, LayoutShell, NavItem, Role

NAVIGATION = {
    Role.student: [
        ("Jobs", "/student/jobs"),
        ("Your Applications", "/student/applications"),
        ("Interview Questions", "/student/generate"),
        ("Account", "/student/account"),
    ],
    Role.recruiter: [
        ("Dashboard", "/recruiter/dashboard"),
        ("Post a Job", "/recruiter/post"),
        ("All Applications", "/recruiter/applications"),
        ("My Account", "/recruiter/account"),
    ],
}


def breadcrumbs(path: str) -> List[Breadcrumb]:
    parts = [p for p in path.split("/") if p]
    crumbs = []
    for index, part in enumerate(parts):
        crumbs.append(Breadcrumb(
            label=part.replace("-", " ").capitalize(),
            href="/" + "/".join(parts[:index + 1]),
            is_last=index == len(parts) - 1
        ))
    return crumbs


def layout_for(role: Role, path: str) -> LayoutShell:
    nav = [
        NavItem(name=name, href=href, active=path == href or path.startswith(href + "/"))
        for name, href in NAVIGATION[role]
    ]
    return LayoutShell(role=role, nav=nav, breadcrumbs=breadcrumbs(path))
