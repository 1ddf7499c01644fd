import json

from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from clinic.services.consultations import UPDATES_GROUP


class ConsultationUpdatesConsumer(AsyncWebsocketConsumer):
    """Push scheduled/canceled consultation events to authenticated clients."""

    async def connect(self):
        user = self.scope.get("user") or AnonymousUser()
        if not user.is_authenticated:
            await self.close(code=4003)
            return
        await self.channel_layer.group_add(UPDATES_GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(UPDATES_GROUP, self.channel_name)

    # event: {"type": "consultation.scheduled", "consultationId": int, ...}
    async def consultation_scheduled(self, event):
        await self.send(json.dumps(event))

    async def consultation_canceled(self, event):
        await self.send(json.dumps(event))
