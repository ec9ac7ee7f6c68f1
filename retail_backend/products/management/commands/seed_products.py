from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import InventoryMovement, Product
from products.services.stock import adjust_stock

DEMO_PRODUCTS = [
    # sku, english, sinhala, tamil, unit, price, opening stock
    ("RICE-NADU", "Nadu Rice", "නාඩු සහල්", "நாடு அரிசி", Product.Unit.KILOGRAM, "220.00", "50"),
    ("DHAL-RED", "Red Dhal", "රතු පරිප්පු", "சிவப்பு பருப்பு", Product.Unit.KILOGRAM, "380.00", "25"),
    ("SUGAR-1KG", "White Sugar 1kg", "සුදු සීනි", "வெள்ளை சீனி", Product.Unit.PACK, "270.00", "40"),
    ("MILK-400", "Milk Powder 400g", "කිරිපිටි", "பால் மா", Product.Unit.PACK, "1150.00", "30"),
    ("SOAP-100", "Bath Soap", "සබන්", "சவர்க்காரம்", Product.Unit.PIECE, "140.00", "100"),
    ("COCO-OIL", "Coconut Oil", "පොල්තෙල්", "தேங்காய் எண்ணெய்", Product.Unit.LITRE, "780.00", "20"),
]


class Command(BaseCommand):
    help = "Seed a small multilingual demo catalog with opening stock"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products and stock..."))

        created_count = 0
        with transaction.atomic():
            for sku, name_en, name_si, name_ta, unit, price, opening in DEMO_PRODUCTS:
                product, created = Product.objects.get_or_create(
                    sku=sku,
                    defaults={
                        "name_en": name_en,
                        "name_si": name_si,
                        "name_ta": name_ta,
                        "unit": unit,
                        "unit_price": Decimal(price),
                    },
                )
                if not created:
                    continue

                # Opening stock goes through the stock service so it has a movement row
                adjust_stock(
                    product=product,
                    movement_type=InventoryMovement.MovementType.RECEIVE,
                    quantity=opening,
                    note="Opening stock (seed)",
                )
                created_count += 1

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded: {created_count} new, {len(DEMO_PRODUCTS) - created_count} existing.")
        )
