"""
Sample data inserted on first start.

When the ``services`` table is empty, a demo business account and
sixteen listings across the marketplace categories are created so the
front end has something to show.  Existing data is never touched.
"""

import logging
import secrets

from service_directory_api.app.core.db import get_connection
from service_directory_api.app.core.security import hash_password


SAMPLE_PROVIDER = {
    "name": "Service Provider",
    "email": "provider@example.com",
    "business_name": "Expert Services Co.",
    "business_category": "Multi-Service",
}

_IMG = "https://images.unsplash.com/photo-{}?w=800&auto=format&fit=crop&q=60"

# (name, category, description, location, price, phone, rating, review_count, image)
SAMPLE_SERVICES = [
    ("Professional Plumbing Services", "Plumbing",
     "Expert plumbing repairs and installations for residential and commercial properties",
     "New York, NY", 85, "555-0101", 4.8, 45, _IMG.format("1581244277943-fe4a9c777189")),
    ("Expert Electrical Work", "Electrical",
     "Licensed electrician providing safe and efficient electrical services",
     "Los Angeles, CA", 95, "555-0102", 4.9, 62, _IMG.format("1621905251189-08b45d6a269e")),
    ("Deep Cleaning Services", "Cleaning",
     "Professional deep cleaning for homes and offices with eco-friendly products",
     "Chicago, IL", 65, "555-0103", 4.7, 38,
     "https://clearchoiceuk.com/wp-content/uploads/2018/08/qualities-and-skills-of-a-commercial-cleaner.jpg"),
    ("Custom Carpentry Work", "Carpentry",
     "Fine woodworking and custom carpentry for all your home renovation needs",
     "Houston, TX", 120, "555-0104", 4.9, 51, _IMG.format("1504148455328-c376907d081c")),
    ("Interior & Exterior Painting", "Painting",
     "High-quality painting services with premium paints and professional finish",
     "Phoenix, AZ", 75, "555-0105", 4.6, 29, _IMG.format("1562259949-e8e7689d7828")),
    ("Landscape Design & Maintenance", "Landscaping",
     "Beautiful landscape design and ongoing maintenance for your outdoor space",
     "Miami, FL", 110, "555-0106", 4.8, 35, _IMG.format("1558904541-efa843a96f01")),
    ("HVAC Installation & Repair", "HVAC",
     "Professional heating, cooling, and ventilation system services",
     "Denver, CO", 150, "555-0107", 4.9, 41, _IMG.format("1585771724684-38269d6639fd")),
    ("Water Damage Restoration", "Water Damage",
     "Emergency water damage repair and complete restoration services",
     "Seattle, WA", 200, "555-0108", 4.7, 28, _IMG.format("1585771724684-38269d6639fd")),
    ("Premium Hair & Beauty Salon", "Hair & Beauty",
     "Professional hair styling, cutting, coloring, and beauty treatments",
     "Boston, MA", 65, "555-0109", 4.8, 92, _IMG.format("1487412720507-e21cc028cb29")),
    ("Professional Pet Grooming", "Pet Services",
     "Expert pet grooming, training, and boarding services for all breeds",
     "Austin, TX", 55, "555-0110", 4.9, 67, _IMG.format("1558788353-f76d92427f16")),
    ("Expert Tutoring Services", "Education",
     "Professional tutoring for all subjects and test preparation",
     "San Francisco, CA", 60, "555-0111", 4.8, 54, _IMG.format("1516321318423-f06f70d504f0")),
    ("Professional Photography Services", "Photography",
     "Event, portrait, and product photography with professional editing",
     "Portland, OR", 250, "555-0112", 4.9, 78, _IMG.format("1547658528-d9f12bfbb57d")),
    ("Moving & Hauling Solutions", "Moving & Hauling",
     "Professional moving, packing, and item hauling services",
     "Atlanta, GA", 120, "555-0113", 4.6, 35, _IMG.format("1534949520255-2c51fb47dd9f")),
    ("Interior Design & Furniture Installation", "Furniture & Decor",
     "Professional interior design and furniture installation services",
     "Miami, FL", 95, "555-0114", 4.7, 42, _IMG.format("1556909114-f6e7ad7d3136")),
    ("General Handyman Solutions", "General Handyman",
     "All-purpose handyman services for repairs and home maintenance",
     "Nashville, TN", 70, "555-0115", 4.7, 61, _IMG.format("1558618666-fcd25c85cd64")),
    ("Professional Locksmith Services", "Locksmith",
     "24/7 locksmith services for emergency lock repair and installation",
     "Philadelphia, PA", 85, "555-0116", 4.8, 73, _IMG.format("1558618666-fcd25c85cd64")),
]


def seed_database() -> int:
    """Insert the sample provider and listings if no listing exists yet.

    Returns the number of listings inserted (0 when the table was not
    empty).  The demo provider gets a random password; use
    ``reset_password.py`` to log in as it.
    """
    logger = logging.getLogger(__name__)
    conn = get_connection()
    try:
        cursor = conn.cursor()
        count = cursor.execute("SELECT COUNT(*) AS count FROM services").fetchone()["count"]
        if count:
            logger.debug("Skipping seed: %s services already present", count)
            return 0
        provider = cursor.execute(
            "SELECT id FROM users WHERE email = ?", (SAMPLE_PROVIDER["email"],)
        ).fetchone()
        if provider:
            provider_id = provider["id"]
        else:
            cursor.execute(
                """
                INSERT INTO users (name, email, password, role, business_name, business_category)
                VALUES (?, ?, ?, 'business', ?, ?)
                """,
                (
                    SAMPLE_PROVIDER["name"],
                    SAMPLE_PROVIDER["email"],
                    hash_password(secrets.token_urlsafe(16)),
                    SAMPLE_PROVIDER["business_name"],
                    SAMPLE_PROVIDER["business_category"],
                ),
            )
            provider_id = cursor.lastrowid
        cursor.executemany(
            """
            INSERT INTO services
                (name, category, description, location, price, phone, rating, review_count, image, provider_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [sample + (provider_id,) for sample in SAMPLE_SERVICES],
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Database seeded with %d sample services", len(SAMPLE_SERVICES))
    return len(SAMPLE_SERVICES)
