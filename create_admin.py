"""
Create admin user for testing
"""
from app.infrastructure.db.session import get_db
from app.infrastructure.db.models import User, ROLE_ADMIN
from app.auth import hash_password

EMAIL = "test@admin.com"
PASSWORD = "TestAdmin123!"

db = next(get_db())

# Check if user exists
existing = db.query(User).filter(User.email == EMAIL).first()
if existing:
    print(f"Admin already exists: {EMAIL} (ID: {existing.id})")
else:
    user = User(
        name="Test Admin",
        email=EMAIL,
        password_hash=hash_password(PASSWORD),
        role=ROLE_ADMIN,
        is_active=True,
    )
    db.add(user)
    db.commit()
    print("Created admin:")
    print(f"  Email: {EMAIL}")
    print(f"  Password: {PASSWORD}")

db.close()
