from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("periods/", views.periods_view, name="periods"),
    path("periods/<int:period_id>/close/", views.close_period_view, name="close-period"),
    path("fx-rates/", views.fx_rates_view, name="fx-rates"),
    path("journals/", views.journals_view, name="journals"),
    path("journals/<int:journal_id>/lines/", views.journal_lines_view, name="journal-lines"),
    path("journals/<int:journal_id>/post/", views.post_journal_view, name="post-journal"),
    path("reports/trial-balance/", views.trial_balance_view, name="trial-balance"),
    path("reports/general-ledger/", views.general_ledger_view, name="general-ledger"),
    path("capital-movements/", views.capital_movements_view, name="capital-movements"),
]
