"""Mapper configuration for the shipment tables."""

import warnings
from datetime import datetime

from sqlalchemy import inspect
from sqlalchemy.orm import configure_mappers

from letter_tracker.models import AccountLetter, TrackingEvent, compute_eta


def test_mappers_configure_without_deprecation_warnings() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        configure_mappers()

    assert not inspect(AccountLetter).relationships


def test_tracking_events_cascade_on_the_foreign_key() -> None:
    (foreign_key,) = TrackingEvent.__table__.c.account_letter_id.foreign_keys

    assert foreign_key.column.table.name == "account_letters"
    assert foreign_key.ondelete == "CASCADE"


def test_compute_eta() -> None:
    assert compute_eta(None) is None
    assert compute_eta(datetime(2024, 1, 5, 10, 0)) == datetime(2024, 1, 10, 10, 0)
