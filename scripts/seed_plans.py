"""Create the schema and insert the default subscription plans."""
from dotenv import load_dotenv

load_dotenv()

from storefront.config import settings  # noqa: E402
from storefront.database import Database  # noqa: E402
from storefront.seeds import seed_plans  # noqa: E402


def main() -> None:
    database = Database.from_settings(settings)
    database.create_all()
    db = database.session()
    try:
        inserted = seed_plans(db)
    finally:
        db.close()
        database.dispose()
    print(f"Seeded {inserted} plan(s)")


if __name__ == "__main__":
    main()
