from django.contrib import admin
from .models import Course, Lesson, Question, Enrollment, LessonProgress

# Register your models here.
admin.site.register(Course)
admin.site.register(Lesson)
admin.site.register(Question)
admin.site.register(Enrollment)
admin.site.register(LessonProgress)
