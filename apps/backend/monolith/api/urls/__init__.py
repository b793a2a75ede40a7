# api/urls/__init__.py
"""
URL configuration for the Adventures API.
"""

from django.urls import path

from ..views.adventures import get_adventure, get_campaign_calendar

urlpatterns = [
    path('adventures/', get_adventure, name='adventure'),
    path('adventures/calendar/', get_campaign_calendar, name='adventure-calendar'),
]
