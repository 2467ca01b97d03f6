from django.urls import path

from .views import period_cost, shift_cost, sick_leave_summary

urlpatterns = [
    path("shift-cost/", shift_cost, name="payroll-shift-cost"),
    path("period-cost/", period_cost, name="payroll-period-cost"),
    path("sick-leave-summary/", sick_leave_summary, name="payroll-sick-leave-summary"),
]
