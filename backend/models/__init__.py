# Models package – importing it registers every table on Base.metadata
from models.user import User, Role
from models.refresh_token import RefreshToken
from models.activity_log import ActivityLog, GuestRegistrationLog
from models.guest import Guest, RegistrationSequence
