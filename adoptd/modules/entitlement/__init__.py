# 📄 File: adoptd/modules/entitlement/__init__.py
# 🧭 Purpose (Layman Explanation):
# Keeps count of today's scans and chat messages and knows whether the user pays for premium.
# 🧪 Purpose (Technical Summary):
# Entitlement module: tier resolution and daily usage metering with check-and-increment semantics.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, plant scanner, chat consultant, weather advice
