"""Default category taxonomy inserted into an empty catalog."""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from src.services.storage.mongo import utcnow

logger = logging.getLogger(__name__)


def _sub(name: str, description: str) -> dict[str, str]:
    return {"name": name, "description": description}


DEFAULT_CATEGORIES: list[dict] = [
    {
        "name": "Braking System",
        "description": "Brake pads, rotors, calipers, and brake fluids",
        "subcategories": [
            _sub("Brake Pads", "High-performance brake pads"),
            _sub("Brake Rotors", "Disc brake rotors and drums"),
            _sub("Brake Calipers", "Brake calipers and hardware"),
            _sub("Brake Fluids", "DOT 3, DOT 4, and DOT 5 brake fluids"),
            _sub("Brake Lines", "Brake hoses and steel lines"),
        ],
    },
    {
        "name": "Engine Components",
        "description": "Engine parts, filters, and performance upgrades",
        "subcategories": [
            _sub("Air Filters", "Engine air filters and intakes"),
            _sub("Oil Filters", "Engine oil filters"),
            _sub("Fuel Filters", "Fuel system filters"),
            _sub("Spark Plugs", "Ignition spark plugs and coils"),
            _sub("Belts & Hoses", "Engine belts and cooling hoses"),
            _sub("Gaskets & Seals", "Engine gaskets and sealing components"),
        ],
    },
    {
        "name": "Lighting",
        "description": "Headlights, taillights, and interior lighting",
        "subcategories": [
            _sub("Headlights", "LED, HID, and halogen headlights"),
            _sub("Taillights", "Rear lighting systems"),
            _sub("Interior Lights", "Cabin and dashboard lighting"),
            _sub("Signal Lights", "Turn signals and hazard lights"),
            _sub("Light Bulbs", "Replacement bulbs and LEDs"),
        ],
    },
    {
        "name": "Suspension",
        "description": "Shocks, struts, springs, and suspension components",
        "subcategories": [
            _sub("Shock Absorbers", "Front and rear shock absorbers"),
            _sub("Struts", "MacPherson and coilover struts"),
            _sub("Springs", "Coil springs and leaf springs"),
            _sub("Bushings", "Suspension bushings and mounts"),
            _sub("Sway Bars", "Anti-roll bars and links"),
        ],
    },
    {
        "name": "Exhaust System",
        "description": "Mufflers, catalytic converters, and exhaust pipes",
        "subcategories": [
            _sub("Mufflers", "Performance and OEM mufflers"),
            _sub("Catalytic Converters", "Emissions control systems"),
            _sub("Exhaust Pipes", "Headers and exhaust tubing"),
            _sub("Resonators", "Sound dampening components"),
        ],
    },
    {
        "name": "Interior",
        "description": "Seats, dashboard, and interior accessories",
        "subcategories": [
            _sub("Seat Covers", "Custom and universal seat covers"),
            _sub("Floor Mats", "All-weather and carpet floor mats"),
            _sub("Dashboard", "Dashboard covers and accessories"),
            _sub("Steering Wheels", "Aftermarket steering wheels"),
            _sub("Interior Trim", "Decorative interior components"),
        ],
    },
    {
        "name": "Exterior",
        "description": "Body parts, mirrors, and exterior accessories",
        "subcategories": [
            _sub("Bumpers", "Front and rear bumpers"),
            _sub("Mirrors", "Side and rearview mirrors"),
            _sub("Grilles", "Front grilles and mesh inserts"),
            _sub("Body Kits", "Aerodynamic body components"),
            _sub("Spoilers", "Rear and front spoilers"),
        ],
    },
    {
        "name": "Tires & Wheels",
        "description": "Tires, rims, and wheel accessories",
        "subcategories": [
            _sub("All-Season Tires", "Year-round tire options"),
            _sub("Performance Tires", "High-performance tires"),
            _sub("Winter Tires", "Snow and ice tires"),
            _sub("Alloy Wheels", "Lightweight alloy rims"),
            _sub("Steel Wheels", "Durable steel rims"),
            _sub("Wheel Accessories", "Lug nuts, center caps, and valve stems"),
        ],
    },
    {
        "name": "Electrical",
        "description": "Batteries, alternators, and electrical components",
        "subcategories": [
            _sub("Batteries", "Car batteries and accessories"),
            _sub("Alternators", "Charging system components"),
            _sub("Starters", "Engine starter motors"),
            _sub("Wiring", "Electrical wiring and connectors"),
            _sub("Fuses & Relays", "Electrical protection components"),
        ],
    },
    {
        "name": "Cooling System",
        "description": "Radiators, thermostats, and cooling components",
        "subcategories": [
            _sub("Radiators", "Engine cooling radiators"),
            _sub("Water Pumps", "Coolant circulation pumps"),
            _sub("Thermostats", "Temperature control valves"),
            _sub("Cooling Fans", "Electric and mechanical fans"),
            _sub("Coolant", "Antifreeze and coolant fluids"),
        ],
    },
    {
        "name": "Transmission",
        "description": "Transmission parts and fluids",
        "subcategories": [
            _sub("Transmission Fluid", "ATF and manual transmission oils"),
            _sub("Clutch Kits", "Manual transmission clutch components"),
            _sub("Torque Converters", "Automatic transmission components"),
            _sub("CV Joints", "Constant velocity joints and axles"),
        ],
    },
]


async def seed_default_categories(collection: AsyncIOMotorCollection) -> int:
    """Insert the default taxonomy when no category exists yet.

    Guarded by a count rather than an upsert, so two processes starting at
    the same moment against an empty database can both insert. Errors are
    logged and swallowed; the service keeps starting without defaults.

    Returns:
        The number of categories inserted, 0 when seeding was skipped or failed.
    """
    try:
        existing = await collection.count_documents({})
        if existing > 0:
            logger.debug("Skipping category seeding, %d already exist", existing)
            return 0

        now = utcnow()
        documents = [
            {
                "name": category["name"],
                "description": category["description"],
                "subcategories": [dict(sub) for sub in category["subcategories"]],
                "isActive": True,
                "createdAt": now,
            }
            for category in DEFAULT_CATEGORIES
        ]
        await collection.insert_many(documents)
    except PyMongoError:
        logger.exception("Error initializing default categories")
        return 0

    logger.info("Default categories initialized (%d inserted)", len(documents))
    return len(documents)
