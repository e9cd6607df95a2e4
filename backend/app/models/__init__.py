from backend.app.models.user import User
from backend.app.models.review import Review
from backend.app.models.project import Project
from backend.app.models.employer import Employer
from backend.app.models.admin import Admin
from backend.app.models.job import Job, JobApplication, JobSubmission
