# letter_tracker/services/seed_service.py
"""
Demo data generator

Builds letter templates, account shipments across named account scenarios
and carrier tracking paths. Planning is pure (injected Random and "now");
seed_database() writes the plan through an AsyncSession.
"""

import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from letter_tracker.models import AccountLetter, Letter, LetterStatus, TrackingEvent, compute_eta
from letter_tracker.utils.logger import logger

LETTER_TEMPLATES = [
    {
        "name": "Welcome Letter",
        "description": "Initial welcome package for new customers",
        "category": "Onboarding",
        "business_unit": "Customer Success",
        "created_by": "john.doe@company.com",
    },
    {
        "name": "Account Statement",
        "description": "Monthly account statement with transaction history",
        "category": "Financial",
        "business_unit": "Finance",
        "created_by": "jane.smith@company.com",
    },
    {
        "name": "Policy Update Notice",
        "description": "Notification about policy changes",
        "category": "Compliance",
        "business_unit": "Legal",
        "created_by": "legal@company.com",
        "control_id": "CTRL-POL-030",
        "control_day_count": 30,
    },
    {
        "name": "Renewal Reminder",
        "description": "Annual renewal reminder for subscriptions",
        "category": "Marketing",
        "business_unit": "Sales",
        "created_by": "sales@company.com",
    },
    {
        "name": "Tax Document 1099",
        "description": "Annual tax document for investment accounts",
        "category": "Tax",
        "business_unit": "Finance",
        "created_by": "tax@company.com",
        "control_id": "CTRL-TAX-031",
        "control_day_count": 31,
    },
    {
        "name": "Rate Change Notice",
        "description": "Notification of interest rate changes",
        "category": "Financial",
        "business_unit": "Finance",
        "created_by": "rates@company.com",
        "control_id": "CTRL-RATE-045",
        "control_day_count": 45,
    },
    {
        "name": "Privacy Policy Update",
        "description": "Updated privacy policy notification",
        "category": "Compliance",
        "business_unit": "Legal",
        "created_by": "privacy@company.com",
        "control_id": "CTRL-PRIV-030",
        "control_day_count": 30,
    },
    {
        "name": "Promotional Offer",
        "description": "Special promotional offer for loyal customers",
        "category": "Marketing",
        "business_unit": "Marketing",
        "created_by": "marketing@company.com",
    },
    {
        "name": "Account Closure Confirmation",
        "description": "Confirmation of account closure request",
        "category": "Service",
        "business_unit": "Operations",
        "created_by": "ops@company.com",
        "control_id": "CTRL-CLOSE-010",
        "control_day_count": 10,
    },
    {
        "name": "Beneficiary Update Form",
        "description": "Form to update account beneficiaries",
        "category": "Service",
        "business_unit": "Operations",
        "created_by": "ops@company.com",
    },
]

# Template keys, 1-based in insertion order
LETTERS = {
    "WELCOME": 1,
    "STATEMENT": 2,
    "POLICY_UPDATE": 3,
    "RENEWAL": 4,
    "TAX_1099": 5,
    "RATE_CHANGE": 6,
    "PRIVACY_UPDATE": 7,
    "PROMO_OFFER": 8,
    "CLOSURE_CONFIRM": 9,
    "BENEFICIARY_FORM": 10,
}

CONTROLLED_LETTERS = [
    key for key, template in zip(LETTERS.values(), LETTER_TEMPLATES)
    if template.get("control_day_count") is not None
]

ADDRESSES = [
    "123 Main St, New York, NY 10001",
    "456 Oak Ave, Los Angeles, CA 90001",
    "789 Pine Rd, Chicago, IL 60601",
    "321 Elm St, Houston, TX 77001",
    "654 Maple Dr, Phoenix, AZ 85001",
    "987 Cedar Ln, Philadelphia, PA 19101",
    "147 Birch Way, San Antonio, TX 78201",
    "258 Walnut Blvd, San Diego, CA 92101",
    "369 Spruce Ct, Dallas, TX 75201",
    "741 Ash St, San Jose, CA 95101",
]

DELIVERED_PATH = [
    ("received", ["Processing Center - Dallas, TX", "Regional Hub - Atlanta, GA", "Main Facility - Memphis, TN"]),
    ("processing", ["Sort Facility - Dallas, TX", "Distribution Center - Houston, TX", "Mail Processing Center"]),
    ("in_transit", ["In transit to local facility", "En route to destination", "Departed regional facility"]),
    ("out_for_delivery", ["Out for delivery - Local Post Office", "With carrier for delivery", "Final delivery in progress"]),
    ("delivered", ["Delivered - Front Door", "Delivered - Mailbox", "Delivered - Recipient"]),
]

RETURNED_PATH = [
    ("received", ["Processing Center - Dallas, TX", "Regional Hub - Atlanta, GA"]),
    ("processing", ["Sort Facility - Dallas, TX", "Distribution Center - Houston, TX"]),
    ("in_transit", ["In transit to local facility", "En route to destination"]),
    ("returned_to_sender", [
        "Returned - Address not found",
        "Returned - Recipient moved",
        "Returned - Undeliverable as addressed",
    ]),
]


class PlannedLetter(BaseModel):
    letter_key: int
    days_ago: int
    status: LetterStatus


class PlannedShipment(BaseModel):
    scenario: str
    account_id: str
    letter_key: int
    address: str
    mailed_at: Optional[datetime] = None
    eta: Optional[datetime] = None
    status: LetterStatus


class PlannedEvent(BaseModel):
    status: str
    location: str
    occurred_at: datetime


class SeedSummary(BaseModel):
    letter_count: int
    unique_accounts: int
    account_letter_count: int
    tracking_event_count: int
    status_counts: Dict[str, int]
    scenario_counts: Dict[str, int]


class Scenario(NamedTuple):
    name: str
    count: int
    generator: Callable[[random.Random], List[PlannedLetter]]


def pick_random_letters(rng: random.Random, count: int, exclude: Sequence[int] = ()) -> List[int]:
    """Distinct letter keys, none of them in exclude"""
    available = [key for key in LETTERS.values() if key not in exclude]
    picked = []
    for _ in range(min(count, len(available))):
        picked.append(available.pop(rng.randint(0, len(available) - 1)))
    return picked


def _by_age(letters: List[PlannedLetter]) -> List[PlannedLetter]:
    return sorted(letters, key=lambda letter: letter.days_ago, reverse=True)


def _welcome_pending(rng):
    return [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=0, status=LetterStatus.NOT_SENT)]


def _welcome_in_transit(rng):
    return [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(1, 4), status=LetterStatus.SHIPPED)]


def _welcome_only(rng):
    return [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(5, 14), status=LetterStatus.DELIVERED)]


def _two_letters(rng):
    second_days = rng.randint(0, 5)
    if second_days == 0:
        second_status = LetterStatus.NOT_SENT
    elif second_days < 3:
        second_status = LetterStatus.SHIPPED
    else:
        second_status = LetterStatus.DELIVERED
    return [
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(14, 30), status=LetterStatus.DELIVERED),
        PlannedLetter(
            letter_key=pick_random_letters(rng, 1, [LETTERS["WELCOME"]])[0],
            days_ago=second_days,
            status=second_status
        ),
    ]


def _welcome_retry(rng):
    return [
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(25, 35), status=LetterStatus.RETURNED),
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(10, 20), status=LetterStatus.DELIVERED),
    ]


def _recent_mail_pending(rng):
    return _by_age([
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(60, 120), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=LETTERS["STATEMENT"], days_ago=rng.randint(20, 50), status=LetterStatus.DELIVERED),
        PlannedLetter(
            letter_key=pick_random_letters(rng, 1, [LETTERS["WELCOME"], LETTERS["STATEMENT"]])[0],
            days_ago=0,
            status=LetterStatus.NOT_SENT
        ),
    ])


def _letter_in_transit(rng):
    return _by_age([
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(90, 150), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=LETTERS["STATEMENT"], days_ago=rng.randint(30, 60), status=LetterStatus.DELIVERED),
        PlannedLetter(
            letter_key=pick_random_letters(rng, 1, [LETTERS["WELCOME"], LETTERS["STATEMENT"]])[0],
            days_ago=rng.randint(1, 4),
            status=LetterStatus.SHIPPED
        ),
    ])


def _active_standard(rng):
    letters = [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(90, 180), status=LetterStatus.DELIVERED)]
    others = pick_random_letters(rng, rng.randint(3, 5) - 1, [LETTERS["WELCOME"]])
    for i, key in enumerate(others):
        letters.append(PlannedLetter(letter_key=key, days_ago=rng.randint(7, 90 - i * 15), status=LetterStatus.DELIVERED))
    return _by_age(letters)


def _established_standard(rng):
    letter_count = rng.randint(5, 10)
    letters = [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(180, 365), status=LetterStatus.DELIVERED)]

    statement_count = rng.randint(2, 4)
    for i in range(statement_count):
        letters.append(PlannedLetter(
            letter_key=LETTERS["STATEMENT"],
            days_ago=rng.randint(30, 150) + i * 30,
            status=LetterStatus.DELIVERED
        ))

    others = pick_random_letters(rng, letter_count - 1 - statement_count, [LETTERS["WELCOME"], LETTERS["STATEMENT"]])
    for key in others:
        letters.append(PlannedLetter(letter_key=key, days_ago=rng.randint(14, 300), status=LetterStatus.DELIVERED))
    return _by_age(letters)


def _went_paperless(rng):
    letters = [PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(240, 300), status=LetterStatus.DELIVERED)]
    # statements stop 90+ days ago
    for i in range(rng.randint(3, 5)):
        letters.append(PlannedLetter(
            letter_key=LETTERS["STATEMENT"],
            days_ago=rng.randint(95, 200) + i * 25,
            status=LetterStatus.DELIVERED
        ))
    if rng.random() > 0.5:
        letters.append(PlannedLetter(
            letter_key=pick_random_letters(rng, 1, [LETTERS["WELCOME"], LETTERS["STATEMENT"]])[0],
            days_ago=rng.randint(100, 180),
            status=LetterStatus.DELIVERED
        ))
    return _by_age(letters)


def _promo_not_received(rng):
    return _by_age([
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(120, 200), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=LETTERS["STATEMENT"], days_ago=rng.randint(60, 100), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=LETTERS["STATEMENT"], days_ago=rng.randint(20, 50), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=LETTERS["PROMO_OFFER"], days_ago=rng.randint(10, 30), status=LetterStatus.RETURNED),
    ])


def _stuck_in_transit(rng):
    # 30-45 days since mailing is 25-40 days past the 5-day ETA
    stuck_key = pick_random_letters(rng, 1, [LETTERS["WELCOME"], *CONTROLLED_LETTERS])[0]
    return _by_age([
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(90, 150), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=stuck_key, days_ago=rng.randint(30, 45), status=LetterStatus.SHIPPED),
    ])


def _regulatory_exception(rng):
    return _by_age([
        PlannedLetter(letter_key=LETTERS["WELCOME"], days_ago=rng.randint(90, 150), status=LetterStatus.DELIVERED),
        PlannedLetter(letter_key=rng.choice(CONTROLLED_LETTERS), days_ago=rng.randint(40, 60), status=LetterStatus.EXCEPTION),
    ])


SCENARIOS = [
    Scenario("Brand New - Pending Welcome", 3, _welcome_pending),
    Scenario("New - Welcome In Transit", 4, _welcome_in_transit),
    Scenario("New - Welcome Only", 5, _welcome_only),
    Scenario("New - Two Letters", 6, _two_letters),
    Scenario("Welcome Kit Retry", 2, _welcome_retry),
    Scenario("Active - Recent Mail Pending", 3, _recent_mail_pending),
    Scenario("Active - Letter In Transit", 4, _letter_in_transit),
    Scenario("Active Standard", 8, _active_standard),
    Scenario("Established Standard", 6, _established_standard),
    Scenario("Went Paperless", 2, _went_paperless),
    Scenario("Promo Not Received", 2, _promo_not_received),
    Scenario("Letter stuck in transit", 2, _stuck_in_transit),
    Scenario("Regulatory exception flagged", 2, _regulatory_exception),
]


def format_account_id(index: int) -> str:
    return f"ACC-{index:05d}"


def plan_shipments(
    rng: random.Random,
    now: datetime,
    scenarios: Sequence[Scenario] = SCENARIOS
) -> List[PlannedShipment]:
    """Expand every scenario into shipments; not_sent rows carry no dates"""
    shipments = []
    account_index = 0
    for scenario in scenarios:
        for _ in range(scenario.count):
            account_id = format_account_id(account_index)
            address = ADDRESSES[account_index % len(ADDRESSES)]
            for planned in scenario.generator(rng):
                mailed_at = None
                if planned.status != LetterStatus.NOT_SENT:
                    mailed_at = now - timedelta(days=planned.days_ago)
                shipments.append(PlannedShipment(
                    scenario=scenario.name,
                    account_id=account_id,
                    letter_key=planned.letter_key,
                    address=address,
                    mailed_at=mailed_at,
                    eta=compute_eta(mailed_at),
                    status=planned.status
                ))
            account_index += 1
    return shipments


def plan_tracking_events(
    rng: random.Random,
    status: LetterStatus,
    mailed_at: Optional[datetime]
) -> List[PlannedEvent]:
    """Carrier path for one shipment, 4-28 hours between events"""
    if status == LetterStatus.NOT_SENT or mailed_at is None:
        return []
    if status == LetterStatus.RETURNED:
        path = RETURNED_PATH
    elif status == LetterStatus.DELIVERED:
        path = DELIVERED_PATH
    else:
        path = DELIVERED_PATH[:rng.randint(1, 3)]

    events = []
    occurred_at = mailed_at
    for event_status, locations in path:
        occurred_at = occurred_at + timedelta(hours=rng.randint(4, 28))
        events.append(PlannedEvent(status=event_status, location=rng.choice(locations), occurred_at=occurred_at))
    return events


async def seed_database(
    session: AsyncSession,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None
) -> SeedSummary:
    """Insert templates, shipments and events; tables are expected to be empty"""
    rng = rng or random.Random()
    now = now or datetime.now()

    logger.info(" Seeding letters...")
    letters = [Letter(created_at=now, **template) for template in LETTER_TEMPLATES]
    session.add_all(letters)
    await session.flush()
    letter_ids = {key: letters[key - 1].id for key in LETTERS.values()}

    logger.info(" Seeding account letters by scenario...")
    shipments = plan_shipments(rng, now)
    status_counts: Dict[str, int] = {}
    scenario_counts: Dict[str, int] = {}
    event_count = 0

    for shipment in shipments:
        account_letter = AccountLetter(
            account_id=shipment.account_id,
            letter_id=letter_ids[shipment.letter_key],
            address=shipment.address,
            mailed_at=shipment.mailed_at,
            eta=shipment.eta,
            status=shipment.status.value,
            created_at=shipment.mailed_at or now
        )
        session.add(account_letter)
        await session.flush()

        for event in plan_tracking_events(rng, shipment.status, shipment.mailed_at):
            session.add(TrackingEvent(
                account_letter_id=account_letter.id,
                status=event.status,
                location=event.location,
                occurred_at=event.occurred_at
            ))
            event_count += 1

        status_counts[shipment.status.value] = status_counts.get(shipment.status.value, 0) + 1

    for scenario in SCENARIOS:
        scenario_counts[scenario.name] = scenario.count

    await session.commit()

    summary = SeedSummary(
        letter_count=len(letters),
        unique_accounts=len({shipment.account_id for shipment in shipments}),
        account_letter_count=len(shipments),
        tracking_event_count=event_count,
        status_counts=dict(sorted(status_counts.items())),
        scenario_counts=scenario_counts
    )
    logger.info(
        f" Seed complete: {summary.letter_count} letters, {summary.account_letter_count} account letters, "
        f"{summary.tracking_event_count} tracking events"
    )
    return summary
