"""
SQLModel database models.

Importing this package registers every table with SQLModel.metadata, which
Alembic and the test suite use as the schema source.

For modifications:
1. Edit the appropriate model file in reviewbox/models/
2. Create an Alembic migration to reflect the changes
"""

from reviewbox.models.category import Categories
from reviewbox.models.invitation import Invitations
from reviewbox.models.review import EvaluationScores, Reviews
from reviewbox.models.review_group import EvaluationCriteria, ReviewGroupMembers, ReviewGroups
from reviewbox.models.review_subject import ReviewSubjects
from reviewbox.models.user import Users

__all__ = [
    "Categories",
    "EvaluationCriteria",
    "EvaluationScores",
    "Invitations",
    "ReviewGroupMembers",
    "ReviewGroups",
    "ReviewSubjects",
    "Reviews",
    "Users",
]
