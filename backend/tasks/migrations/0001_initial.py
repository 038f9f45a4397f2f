import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='title')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('status', models.CharField(choices=[('todo', 'To do'), ('in_progress', 'In progress'), ('review', 'Review'), ('done', 'Done')], default='todo', max_length=20, verbose_name='status')),
                ('due_date', models.DateTimeField(blank=True, help_text='The deadline for the task.', null=True, verbose_name='due date')),
                ('manual_priority', models.CharField(blank=True, choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], help_text='Optional human override fed into the priority score.', max_length=10, null=True, verbose_name='manual priority')),
                ('priority_score', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(100)], verbose_name='priority score')),
                ('eisenhower_category', models.CharField(blank=True, choices=[('do_first', 'Do first'), ('schedule', 'Schedule'), ('delegate', 'Delegate'), ('delete', 'Delete')], max_length=10, null=True, verbose_name='eisenhower category')),
                ('priority_reasoning', models.TextField(blank=True, verbose_name='priority reasoning')),
                ('scored_at', models.DateTimeField(blank=True, help_text='The instant the current score was computed for.', null=True, verbose_name='scored at')),
                ('position', models.IntegerField(default=0, verbose_name='position')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='completed at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to=settings.AUTH_USER_MODEL, verbose_name='owner')),
            ],
            options={
                'verbose_name': 'Task',
                'verbose_name_plural': 'Tasks',
                'ordering': ['-priority_score', 'due_date', '-created_at'],
            },
        ),
    ]
