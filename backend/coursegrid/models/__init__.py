from coursegrid.models.course import Course  # noqa: F401
from coursegrid.models.enrollment import Enrollment  # noqa: F401
from coursegrid.models.schedule_block import WEEKDAYS, ScheduleBlock, Weekday  # noqa: F401
from coursegrid.models.student_block_assignment import StudentBlockAssignment  # noqa: F401
from coursegrid.models.user import User, UserRole  # noqa: F401
