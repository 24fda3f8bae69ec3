from app.models.waitlist import WaitlistEntry        # noqa: F401
