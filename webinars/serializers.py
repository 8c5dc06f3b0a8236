from rest_framework import serializers
from .models import Webinar
from .services import is_registered

MEETING_FIELDS = ('meeting_link', 'meeting_password')


class WebinarSerializer(serializers.ModelSerializer):
    instructor_name = serializers.CharField(source='instructor.display_name', read_only=True)
    seats_left = serializers.IntegerField(read_only=True)
    is_registered = serializers.SerializerMethodField()

    class Meta:
        model = Webinar
        fields = [
            'id', 'title', 'description', 'instructor', 'instructor_name', 'webinar_type',
            'meeting_link', 'meeting_password', 'scheduled_at', 'duration', 'end_time',
            'is_free', 'price', 'max_participants', 'seats_left', 'registration_deadline',
            'thumbnail', 'status', 'total_registrations', 'total_attendees',
            'is_registered', 'created_at',
        ]
        read_only_fields = [
            'instructor', 'end_time', 'total_registrations', 'total_attendees', 'created_at',
        ]
        extra_kwargs = {'meeting_password': {'required': False}}

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def get_is_registered(self, obj):
        return is_registered(obj, self._user())

    def can_see_meeting(self, obj):
        user = self._user()
        if not user or not user.is_authenticated:
            return False
        return user.is_admin_role or obj.instructor_id == user.id or is_registered(obj, user)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.can_see_meeting(instance):
            for field in MEETING_FIELDS:
                data.pop(field, None)
        return data

    def validate(self, attrs):
        scheduled_at = attrs.get('scheduled_at', getattr(self.instance, 'scheduled_at', None))
        deadline = attrs.get('registration_deadline', getattr(self.instance, 'registration_deadline', None))
        if deadline and scheduled_at and deadline > scheduled_at:
            raise serializers.ValidationError({'registration_deadline': "Must not be after the webinar starts"})

        is_free = attrs.get('is_free', getattr(self.instance, 'is_free', True))
        price = attrs.get('price', getattr(self.instance, 'price', 0))
        if is_free and price:
            raise serializers.ValidationError({'price': "Free webinars cannot have a price"})
        if not is_free and not price:
            raise serializers.ValidationError({'price': "Paid webinars need a price"})
        return attrs
