"""School Attendance package.

Feature modules (catalog, students, attendance, reports) each follow the same
split: plain dataclass models, a repository Protocol with a MySQL
implementation, a service holding the rules, and a thin Flask controller.
"""
