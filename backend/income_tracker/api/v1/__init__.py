# income_tracker.api.v1 package - exports the router modules so
# "from income_tracker.api.v1 import auth, users, ..." works.
from . import analytics, auth, entities, health, incomes, users
