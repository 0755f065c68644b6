from .application import Application
from .job import Job, JobLocation
from .user import User

__all__ = ["Application", "Job", "JobLocation", "User"]
