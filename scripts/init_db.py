from invoicedesk.config import get_settings
from invoicedesk.db.engine import get_engine
from invoicedesk.db.schema import create_schema
from invoicedesk.services.credentials import add_user


def main():
    settings = get_settings()
    engine = get_engine(settings.database_url)
    create_schema(engine, drop_existing=True)
    print("DB schema created, revenue buckets seeded.")

    if settings.admin_email and settings.admin_password:
        add_user(engine, "Administrator", settings.admin_email, settings.admin_password)
        print(f"Admin user {settings.admin_email} created.")

if __name__ == "__main__":
    main()
