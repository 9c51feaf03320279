"""OJT attendance reconciliation package.

Organised by feature modules (punches, schedules, overtime, reconciliation,
review) with thin Flask controllers on top of service/repository layers.
"""
