from app.database import Base, engine
from app.models import user, post, comment  # noqa: F401 - registers models on Base.metadata

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("✅ All tables created successfully!")
