from django.urls import path
from .views import list_create_view
from .views import retrieve_update_destroy_view
from .views import classify_view
from .views import matrix_view

urlpatterns = [
    # GET and POST (List tasks and Create new task)
    path('', list_create_view, name="task-list"),

    # GET (open tasks grouped by Eisenhower category)
    path('matrix/', matrix_view, name="task-matrix"),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<int:pk>/', retrieve_update_destroy_view, name="task-detail"),

    # POST (re-run the priority engine)
    path('<int:pk>/classify/', classify_view, name="task-classify"),
]
