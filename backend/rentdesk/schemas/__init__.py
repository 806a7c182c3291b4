"""Pydantic schemas for the RentDesk API."""

from rentdesk.schemas.auth import *
from rentdesk.schemas.profile import *
from rentdesk.schemas.property import *
from rentdesk.schemas.invitation import *
from rentdesk.schemas.lease import *
from rentdesk.schemas.notice import *
from rentdesk.schemas.invoice import *
from rentdesk.schemas.renter_status import *
from rentdesk.schemas.message import *
from rentdesk.schemas.dashboard import *
