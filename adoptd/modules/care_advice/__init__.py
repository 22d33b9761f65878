# 📄 File: adoptd/modules/care_advice/__init__.py
# 🧭 Purpose (Layman Explanation):
# Turns the local weather into plant care tips and spots 'in N days' hints in care instructions.
# 🧪 Purpose (Technical Summary):
# Care advice module: WeatherAPI client, ordered weather rule table and time-phrase extraction.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, plant AI module, care advice endpoints
