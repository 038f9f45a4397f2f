from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Task
from .priority_engine import CATEGORIES
from .serializers import TaskSerializer
from .services import classify_task


class TaskOwnerPermission(permissions.BasePermission):
    """
    Custom permission to only allow owners of a Task to view, edit, or delete it.
    """
    def has_object_permission(self, request, view, obj):
        return obj.owner == request.user


class TaskListCreateView(generics.ListCreateAPIView):
    """
    GET: List the authenticated user's tasks, highest priority first.
         Optional filters: ?status=<status>&category=<eisenhower category>
    POST: Create a new task; it is scored on creation.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        # ensure user only sees own tasks
        queryset = Task.objects.filter(owner=self.request.user)

        task_status = self.request.query_params.get('status')
        if task_status:
            queryset = queryset.filter(status=task_status)

        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(eisenhower_category=category)

        return queryset

list_create_view = TaskListCreateView.as_view()


class TaskRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific task instance.
    Edits to title, description, due_date or manual_priority re-score the task.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, TaskOwnerPermission]

    # Ensures the user can only access tasks they own.
    def get_queryset(self):
        return Task.objects.filter(owner=self.request.user)

retrieve_update_destroy_view = TaskRetrieveUpdateDestroyView.as_view()


class TaskClassifyView(APIView):
    """
    POST: Re-run the priority engine on a task and persist the result.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        task = get_object_or_404(Task, pk=pk, owner=request.user)
        result = classify_task(task.id)
        if not result["success"]:
            # A stored row the engine rejects is a client data problem
            if "field" in result:
                return Response(result, status=status.HTTP_400_BAD_REQUEST)
            return Response(result, status=status.HTTP_404_NOT_FOUND)
        return Response(result)

classify_view = TaskClassifyView.as_view()


class EisenhowerMatrixView(APIView):
    """
    GET: Open tasks grouped into the four Eisenhower quadrants.
    Each quadrant is ordered by priority_score descending.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        open_tasks = (
            Task.objects.filter(owner=request.user)
            .exclude(status=Task.Status.DONE)
            .order_by('-priority_score', 'due_date', '-created_at')
        )

        matrix = {category: [] for category in CATEGORIES}
        context = {'request': request}
        for task in open_tasks:
            if task.eisenhower_category in matrix:
                matrix[task.eisenhower_category].append(TaskSerializer(task, context=context).data)

        return Response(matrix)

matrix_view = EisenhowerMatrixView.as_view()
