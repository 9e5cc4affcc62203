from backend.app.models.user import User
from backend.app.models.profile import UserProfile, UserFiles
from backend.app.models.job import Job
from backend.app.models.application import Application
from backend.app.models.employer_profile import EmployerProfile
