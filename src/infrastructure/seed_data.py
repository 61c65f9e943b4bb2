"""
Demo roster and trips, loaded when the snapshot database is empty.

Creates:
  - 5 children across two schools in Bangsar / Damansara
  - 5 drivers (4 approved, 1 pending onboarding)
  - a guardian, a teacher and an operator account
  - 3 live trips (in progress, waiting at pickup, en route)
"""

from __future__ import annotations

from datetime import datetime, timedelta

from src.domain.entities import Alert, Driver, Passenger, Trip, User
from src.domain.enums import AlertType, OnboardingStatus, TripStatus, UserRole

USERS = [
    User(id="P_DAKRM8J5", name="Siti Zulkifli", role=UserRole.PARENT, phone="01800455268"),
    User(
        id="T_HENDERSON",
        name="Mr. Henderson",
        role=UserRole.TEACHER,
        phone="+1 (555) 999-8888",
        school_id="SK Bangsar",
        gate="Gate 1",
    ),
    User(id="A_OPS_HQ", name="Admin HQ", role=UserRole.ADMIN, phone="999"),
]

CHILDREN = [
    Passenger(
        id="C_XFGCAQVK", parent_id="P_DAKRM8J5", name="Haziq", age=9,
        school="Garden International School (Nearby)",
        pickup_address="Lucky Garden", drop_address="GIS Gate A",
    ),
    Passenger(
        id="C_Y72WX7PT", parent_id="P_N78BMYYM", name="Chloe", age=14,
        school="SK Bangsar", pickup_address="Jalan Maarof",
        drop_address="SK Bangsar Gate 1",
    ),
    Passenger(
        id="C_FL0UKEYZ", parent_id="P_PBMYOFQE", name="Izzah", age=7,
        school="SK Bangsar", pickup_address="Bangsar Baru",
        drop_address="SK Bangsar Gate 1",
    ),
    Passenger(
        id="C_V60VAIY4", parent_id="P_UE8YFBNT", name="Adam", age=7,
        school="SK Bangsar", pickup_address="Jalan Maarof",
        drop_address="SK Bangsar Gate 2",
    ),
    Passenger(
        id="C_WIYKID91", parent_id="P_DAKRM8J5", name="Bella", age=9,
        school="SK Bangsar", pickup_address="Pantai Dalam Edge",
        drop_address="SK Bangsar Gate 2",
    ),
]

DRIVERS = [
    Driver(
        id="D_NFVOBBZ2", name="Alya Aziz", rating=4.95, vehicle="Toyota Innova",
        plate="WLP6490", license_id="MY-829201-L", is_verified=True,
        onboarding_status=OnboardingStatus.APPROVED,
        current_lat=3.1306, current_lng=101.6673,
    ),
    Driver(
        id="D_LXSLG6MM", name="Amir Tan", rating=4.9, vehicle="Honda HR-V",
        plate="WRU5566", license_id="MY-771203-D", is_verified=True,
        onboarding_status=OnboardingStatus.APPROVED,
        current_lat=3.1093, current_lng=101.6655,
    ),
    Driver(
        id="D_OW4VSSRU", name="Siti Omar", rating=4.08, vehicle="Perodua Aruz",
        plate="WVJ7305", license_id="MY-910405-A", is_verified=True,
        onboarding_status=OnboardingStatus.APPROVED,
        current_lat=3.1478, current_lng=101.6953,
    ),
    Driver(
        id="D_6DUT076G", name="Syafiq Omar", rating=4.9, vehicle="Toyota Vios",
        plate="WYA7212", license_id="MY-850607-V", is_verified=True,
        onboarding_status=OnboardingStatus.APPROVED,
        current_lat=3.1326, current_lng=101.6651,
    ),
    Driver(
        id="D_KK791ZYR", name="Nadia Zulkifli", rating=4.46, vehicle="Perodua Aruz",
        plate="WJY4186", license_id="MY-990809-Z", is_verified=False,
        onboarding_status=OnboardingStatus.PENDING,
    ),
]


def demo_trips(now: datetime) -> list[Trip]:
    return [
        Trip(
            id="T_VWV8LW2Q",
            child_id="C_Y72WX7PT",
            driver_id="D_NFVOBBZ2",
            status=TripStatus.IN_PROGRESS,
            start_time=now - timedelta(minutes=20),
            estimated_arrival=now + timedelta(minutes=5),
            last_updated=now,
            current_lat=3.1306,
            current_lng=101.6673,
            verification_pin="3190",
        ),
        Trip(
            id="T_FGJK2N7Z",
            child_id="C_XFGCAQVK",
            driver_id="D_LXSLG6MM",
            status=TripStatus.ARRIVED_AT_PICKUP,
            start_time=now - timedelta(minutes=5),
            estimated_arrival=now + timedelta(minutes=15),
            last_updated=now,
            current_lat=3.1093,
            current_lng=101.6655,
            route_deviation=True,
            verification_pin="4821",
            alerts=[
                Alert(
                    id="A_O20U9ISY",
                    trip_id="T_FGJK2N7Z",
                    type=AlertType.DEVIATION,
                    message="Vehicle stopped outside safe zone for 4 minutes.",
                    timestamp=now,
                )
            ],
        ),
        Trip(
            id="T_DDH0UYHN",
            child_id="C_FL0UKEYZ",
            driver_id="D_6DUT076G",
            status=TripStatus.EN_ROUTE_TO_PICKUP,
            start_time=now - timedelta(minutes=2),
            estimated_arrival=now + timedelta(minutes=8),
            last_updated=now,
            current_lat=3.1326,
            current_lng=101.6651,
            verification_pin="7053",
        ),
    ]
