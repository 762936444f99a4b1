"""Placeholder results for when live extraction comes back empty.

This is a caller-level policy, off unless DEMO_FALLBACK_ENABLED is set.
Responses built from it carry ``status="demo_data"`` so clients can tell
them apart from real results.
"""

from typing import Dict, List

from sourcing.models import ProductRecord

DEMO_MESSAGE = "Showing demo data. {retailer} may be blocking automated access."

_DEMO_RECORDS: Dict[str, List[ProductRecord]] = {
    "walmart": [
        ProductRecord(
            name='HP 15.6" FHD Laptop, Intel Core i5-1135G7, 8GB RAM, 256GB SSD, Silver',
            price="$379.00",
            link="https://www.walmart.com/ip/HP-15-6-FHD-Laptop-Intel-Core-i5-1135G7-8GB-RAM-256GB-SSD-Silver/123456789",
            image="https://i5.walmartimages.com/asr/sample.jpg",
            source="Walmart (Demo Data)",
        ),
        ProductRecord(
            name='Lenovo IdeaPad 3i 15.6" FHD Touch Screen Laptop, Intel Core i3-1115G4, 8GB RAM, 256GB SSD',
            price="$329.00",
            link="https://www.walmart.com/ip/Lenovo-IdeaPad-3i-15-6-FHD-Touch-Screen-Laptop-Intel-Core-i3-1115G4-8GB-RAM-256GB-SSD/987654321",
            image="https://i5.walmartimages.com/asr/sample2.jpg",
            source="Walmart (Demo Data)",
        ),
    ],
}


def demo_records_for(provider_id: str) -> List[ProductRecord]:
    return [record.model_copy() for record in _DEMO_RECORDS.get(provider_id, [])]


def demo_message_for(retailer: str) -> str:
    return DEMO_MESSAGE.format(retailer=retailer)
