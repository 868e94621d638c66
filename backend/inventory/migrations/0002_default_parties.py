from django.db import migrations


def create_default_parties(apps, schema_editor):
    BuyerParty = apps.get_model("inventory", "BuyerParty")
    SellerParty = apps.get_model("inventory", "SellerParty")
    BuyerParty.objects.get_or_create(party_name="Retail Buyer")
    SellerParty.objects.get_or_create(party_name="Retail Seller")


def remove_default_parties(apps, schema_editor):
    BuyerParty = apps.get_model("inventory", "BuyerParty")
    SellerParty = apps.get_model("inventory", "SellerParty")
    BuyerParty.objects.filter(party_name="Retail Buyer", purchases__isnull=True).delete()
    SellerParty.objects.filter(party_name="Retail Seller", sales__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_default_parties, remove_default_parties),
    ]
