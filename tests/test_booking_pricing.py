from datetime import date

import pytest

from app.models.property import RejectionCategory
from app.services.booking_pricing import compute_booking, whole_months_between
from app.services.contact_links import email_link, phone_link, whatsapp_link
from app.services.moderation_service import bulk_outcome, format_rejection_reason
from app.schemas.property_schemas import BulkOutcome
from app.services.rent_payment_service import due_date_for, iter_months, month_start


class TestComputeBooking:
    """Month-based booking price"""

    def test_short_stay_billed_as_one_month(self):
        """Stays shorter than a month cost one month"""
        quote = compute_booking(500000, date(2026, 1, 10), date(2026, 1, 20), 10)
        assert quote.months == 1
        assert quote.subtotal == 500000
        assert quote.service_fee == 50000
        assert quote.total_amount == 550000

    def test_whole_months_only(self):
        """Partial trailing months are not billed"""
        quote = compute_booking(500000, date(2026, 1, 1), date(2027, 2, 4), 10)
        assert quote.months == 13
        assert quote.subtotal == 6500000

    def test_exact_months(self):
        quote = compute_booking(500000, date(2026, 1, 15), date(2026, 4, 15), 10)
        assert quote.months == 3
        assert quote.subtotal == 1500000
        assert quote.service_fee == 150000
        assert quote.total_amount == 1650000

    def test_end_of_month_start(self):
        """Jan 31 to Feb 28 counts as a whole month (end-of-month clamping)"""
        assert whole_months_between(date(2026, 1, 31), date(2026, 2, 28)) == 1
        assert whole_months_between(date(2026, 1, 31), date(2026, 2, 27)) == 0
        assert compute_booking(1000, date(2026, 1, 31), date(2026, 2, 28), 10).months == 1

    def test_fee_rounded_to_cents(self):
        quote = compute_booking(333.33, date(2026, 3, 1), date(2026, 3, 15), 7.5)
        assert quote.service_fee == 25.0
        assert quote.total_amount == 358.33

    def test_zero_commission(self):
        quote = compute_booking(1200, date(2026, 1, 1), date(2026, 3, 1), 0)
        assert quote.service_fee == 0
        assert quote.total_amount == quote.subtotal == 2400

    def test_total_is_subtotal_plus_fee(self):
        quote = compute_booking(750000, date(2026, 5, 2), date(2026, 11, 20), 12.5)
        assert quote.total_amount == round(quote.subtotal + quote.service_fee, 2)


class TestContactLinks:
    """tel:, mailto: and WhatsApp links"""

    def test_whatsapp_keeps_digits_and_encodes_message(self):
        link = whatsapp_link("+255 712-345 678", "Hello there & welcome")
        assert link == "https://wa.me/255712345678?text=Hello%20there%20%26%20welcome"

    def test_whatsapp_without_message(self):
        assert whatsapp_link("+255712345678") == "https://wa.me/255712345678"

    def test_missing_phone_gives_no_links(self):
        assert whatsapp_link(None, "hi") is None
        assert whatsapp_link("n/a", "hi") is None
        assert phone_link(None) is None

    def test_phone_and_email_links(self):
        assert phone_link("+255712345678") == "tel:+255712345678"
        assert email_link("host@example.com") == "mailto:host@example.com"
        assert email_link("") is None


class TestRentSchedule:
    """Billing months and due dates"""

    def test_months_inclusive_of_both_ends(self):
        months = list(iter_months(date(2026, 11, 15), date(2027, 2, 3)))
        assert months == [date(2026, 11, 1), date(2026, 12, 1), date(2027, 1, 1), date(2027, 2, 1)]

    def test_month_start(self):
        assert month_start(date(2026, 7, 19)) == date(2026, 7, 1)

    def test_due_day_offset(self):
        assert due_date_for(date(2026, 3, 1), 1) == date(2026, 3, 1)
        assert due_date_for(date(2026, 3, 1), 5) == date(2026, 3, 5)

    @pytest.mark.parametrize(
        "month, expected",
        [
            (date(2026, 2, 1), date(2026, 2, 28)),
            (date(2028, 2, 1), date(2028, 2, 29)),
            (date(2026, 4, 1), date(2026, 4, 30)),
            (date(2026, 5, 1), date(2026, 5, 31)),
        ],
    )
    def test_due_day_clamped_to_month_end(self, month, expected):
        assert due_date_for(month, 31) == expected


class TestModerationHelpers:
    def test_rejection_reason_with_notes(self):
        reason = format_rejection_reason(RejectionCategory.POOR_QUALITY_IMAGES, "Photos are blurry")
        assert reason == "Poor quality images: Photos are blurry"

    def test_rejection_reason_label_only(self):
        assert format_rejection_reason(RejectionCategory.DUPLICATE_LISTING, "  ") == "Duplicate listing"
        assert format_rejection_reason(RejectionCategory.OTHER) == "Other"

    def test_bulk_outcome(self):
        assert bulk_outcome(3, 0) == BulkOutcome.SUCCESS
        assert bulk_outcome(2, 1) == BulkOutcome.PARTIAL
        assert bulk_outcome(0, 2) == BulkOutcome.FAILED
