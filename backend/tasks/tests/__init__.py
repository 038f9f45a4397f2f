# tasks/tests/__init__.py
"""
Task App Test Suite
===================

This package contains unit and integration tests for the tasks application.

Modules:
--------
- test_engine: Unit tests for the priority engine (factors, gates, reasoning)
- test_urgency: Unit tests for the countdown presenter and its divergence from scoring
- test_services: Integration tests for persisting scores and the Celery jobs
- test_api: HTTP tests for the task endpoints

Running Tests:
--------------
    # Run all task tests
    python manage.py test tasks

    # Run specific test module
    python manage.py test tasks.tests.test_engine

    # Or via pytest-django from the repository root
    pytest
"""
