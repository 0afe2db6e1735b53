import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///eco_calculator.db").replace("postgres://", "postgresql://", 1)
SQLALCHEMY_DATABASE_URI = DATABASE_URL

SECRET_KEY = os.getenv("SECRET_KEY")

# Emissions provider: 'climatiq' or 'carbon_interface'
EMISSIONS_PROVIDER = os.getenv("EMISSIONS_PROVIDER", "climatiq")
CLIMATIQ_API_KEY = os.getenv("CLIMATIQ_API_KEY")
CARBON_INTERFACE_API_KEY = os.getenv("CARBON_INTERFACE_API_KEY")
EMISSIONS_API_TIMEOUT = int(os.getenv("EMISSIONS_API_TIMEOUT", "30"))

# Country used for electricity estimates by providers that need one
ENERGY_COUNTRY_CODE = os.getenv("ENERGY_COUNTRY_CODE", "us")

# Jinja2 whitespace control - prevents unwanted line breaks in rendered HTML
JINJA2_TRIM_BLOCKS = True
JINJA2_LSTRIP_BLOCKS = True
