"""School attendance rules package.

Organized by feature modules (permissions, justifications, attendance, ...)
with thin Flask controllers on top of service/repository layers.
"""
