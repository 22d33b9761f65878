# 📄 File: adoptd/modules/plant_ai/__init__.py
# 🧭 Purpose (Layman Explanation):
# The plant doctor itself: recognises plants and their diseases from photos and answers care questions.
# 🧪 Purpose (Technical Summary):
# Plant AI module: prompt building, Gemini client, response parsers, metered scanner and chat consultant.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, plant AI endpoints
