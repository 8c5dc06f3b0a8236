# quizzes/views.py
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView
from core.responses import send_response
from . import services
from .serializers import QuizSubmissionSerializer, QuizAttemptSerializer


class SubmitQuizView(APIView):
    """Submit answers for a quiz lesson and get the scored attempt back"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = QuizSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attempt = services.submit_quiz(request.user, **serializer.validated_data)
        return send_response(QuizAttemptSerializer(attempt).data, "Quiz submitted", status.HTTP_201_CREATED)


class MyQuizResultsView(APIView):
    """All of the current student's attempts within a course, newest first"""
    permission_classes = [IsAuthenticated]

    def get(self, request, course_id):
        attempts = services.get_student_results(request.user, course_id)
        return send_response(QuizAttemptSerializer(attempts, many=True).data, "Results fetched")
