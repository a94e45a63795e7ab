from decimal import Decimal

import pytest

from storefront.domain.errors import InvalidInput, NotFound
from storefront.domain.schemas import TaxIn


def test_create_and_delete_tax(tax_service):
    tax = tax_service.create_tax(TaxIn(name="GST", rate=Decimal("18")))

    assert [t.name for t in tax_service.list_taxes()] == ["GST"]

    tax_service.delete_tax(tax.id)
    assert tax_service.list_taxes() == []
    with pytest.raises(NotFound):
        tax_service.delete_tax(tax.id)


@pytest.mark.parametrize("rate", ["-1", "100.001", "1000"])
def test_rate_outside_percent_range_rejected(tax_service, rate):
    with pytest.raises(InvalidInput):
        tax_service.create_tax(TaxIn(name="Bad", rate=Decimal(rate)))

    assert tax_service.list_taxes() == []


def test_full_rate_allowed(tax_service):
    assert tax_service.create_tax(TaxIn(name="Luxury", rate=Decimal("100"))).rate == Decimal("100")
