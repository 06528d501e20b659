"""CampusConnect backend: users, events, resources, projects, mentorship and discussions."""

__version__ = "1.0.0"
