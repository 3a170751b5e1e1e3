import os

# Keep the app's module-level engine off the working directory
os.environ.setdefault('CATALOG_DATABASE_URL', 'sqlite://')
