from . import auth, discussions, events, mentorship, projects, resources

routers = [
    auth.router,
    auth.profile_router,
    events.router,
    resources.router,
    projects.router,
    mentorship.router,
    discussions.router,
]
