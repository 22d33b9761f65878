# 📄 File: adoptd/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Version 1 of the plant doctor API, grouped so a later version can live alongside it.
# 🧪 Purpose (Technical Summary):
# Route prefixes and OpenAPI tags shared by the v1 router aggregation.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# adoptd.api.v1.router, adoptd.main

__api_version__ = "v1"

ROUTE_PREFIXES = {
    "auth": "/auth",
    "profiles": "/profiles",
    "entitlement": "",
    "achievements": "",
    "forum": "/forum",
    "reminders": "",
    "notifications": "",
    "care_advice": "",
    "plant_ai": "/ai",
}

API_TAGS = [
    {"name": "Authentication", "description": "Sign-in, sign-up and session"},
    {"name": "Profiles", "description": "Name, occupation and avatar"},
    {"name": "Usage", "description": "Daily limits and subscription plans"},
    {"name": "Achievements", "description": "Achievements and equippable titles"},
    {"name": "Forum", "description": "Community posts, comments and likes"},
    {"name": "Reminders", "description": "Scheduled care reminders"},
    {"name": "Notifications", "description": "Notification permission and outbox"},
    {"name": "Care Advice", "description": "Weather-based care recommendations"},
    {"name": "Plant AI", "description": "Photo identification, diagnosis and chat"},
    {"name": "Health Check", "description": "Liveness and dependency status"},
]
