from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ColumnLayoutPreference",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("owner_id", models.CharField(blank=True, default="", max_length=128)),
                ("storage_key", models.CharField(max_length=255)),
                ("value", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "fleet_grid_column_layout_preference",
                "ordering": ["owner_id", "storage_key"],
            },
        ),
        migrations.AddConstraint(
            model_name="columnlayoutpreference",
            constraint=models.UniqueConstraint(
                fields=("owner_id", "storage_key"),
                name="fleet_grid_layout_owner_key_unique",
            ),
        ),
    ]
