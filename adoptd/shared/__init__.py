# 📄 File: adoptd/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools that every part of the
# plant doctor uses, like settings, errors and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, exception hierarchy, observable state
# primitives, structured logging and infrastructure clients.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All feature modules under adoptd.modules

__all__ = []
