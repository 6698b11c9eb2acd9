# Copyright 2026 UCP Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Next billing date estimate shown on the success screen.

Display only: the provider decides the real debit date.
"""

import calendar
from datetime import datetime, tzinfo
from typing import Optional


def add_calendar_month(moment: datetime) -> datetime:
    """
    Return the same instant one calendar month later.

    The day is clamped to the last day of the target month, so 31 January
    becomes 28 (or 29) February.
    """
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def format_billing_date(moment: datetime) -> str:
    """Long en-IN date, e.g. '19 November 2026'."""
    return f"{moment.day} {calendar.month_name[moment.month]} {moment.year}"


def next_billing_date(moment: datetime, zone: Optional[tzinfo] = None) -> str:
    """
    One calendar month after moment, as the customer's calendar shows it.

    An aware moment is first converted to zone, so a late-evening UTC
    instant counts as the next day in India.
    """
    if zone is not None and moment.tzinfo is not None:
        moment = moment.astimezone(zone)
    return format_billing_date(add_calendar_month(moment))
