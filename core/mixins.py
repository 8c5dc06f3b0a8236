from .responses import send_response


class EnvelopeDestroyMixin:
    """Answer deletes with an envelope instead of an empty 204."""

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        label = instance._meta.verbose_name.capitalize()
        self.perform_destroy(instance)
        return send_response(None, f"{label} deleted")
