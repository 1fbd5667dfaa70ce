from .user import User, Profile
from .tags import Skill, Brand
from .mission import Mission
from .message import Message
from .availability import AvailabilityPeriod
