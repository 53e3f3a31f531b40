"""Seeds the products collection with a few sample listings."""
from datetime import datetime, timedelta, timezone

from storefront.api.schemas.product import ProductDraft
from storefront.config import settings
from storefront.database import FileBackedStore
from storefront.services.editing import create_product

SAMPLES = [
    {
        "name": "Wireless Noise Cancelling Headphones",
        "details": "Over-ear Bluetooth headphones with 30 hour battery life.",
        "specifications": "Bluetooth 5.2\nUSB-C charging",
        "price": "7999",
        "rating": "4.5",
        "category": "Electronics",
        "imageUrl": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=600",
        "referralLink": "https://www.amazon.in/dp/B0EXAMPLE1",
        "freeDelivery": True,
        "topBrand": True,
    },
    {
        "name": "Cotton Bedsheet Set",
        "details": "King size 300 TC cotton bedsheet with two pillow covers.",
        "price": "1299",
        "rating": "4.1",
        "category": "Home & Garden",
        "imageUrl": "https://images.unsplash.com/photo-1522771739844-6a9f6d5f14af?w=600",
        "referralLink": "https://www.amazon.in/dp/B0EXAMPLE2",
        "returnAvailable": True,
    },
    {
        "name": "Atomic Habits",
        "details": "Paperback edition of James Clear's bestseller.",
        "price": "399",
        "rating": "4.8",
        "category": "Books",
        "imageUrl": "https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=600",
        "referralLink": "https://www.amazon.in/dp/B0EXAMPLE3",
        "freeDelivery": True,
    },
]


def main():
    store = FileBackedStore(settings.DATA_DIR)
    if store.snapshot(settings.PRODUCTS_PATH):
        print(f"{settings.PRODUCTS_PATH} already has data, nothing to do")
        return
    start = datetime.now(timezone.utc) - timedelta(days=len(SAMPLES))
    for i, sample in enumerate(SAMPLES):
        draft = ProductDraft.model_validate(sample)
        identity = create_product(store, draft, now=start + timedelta(days=i))
        print(f"Created {identity}: {draft.name}")


if __name__ == "__main__":
    main()
