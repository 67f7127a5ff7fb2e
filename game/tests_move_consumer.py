from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase

from game.consumers import MoveConsumer
from game.routing import websocket_urlpatterns


class MoveConsumerTests(SimpleTestCase):
    async def test_move_over_socket(self):
        communicator = WebsocketCommunicator(MoveConsumer.as_asgi(), "/ws/move/")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await communicator.send_json_to(
            {"boardState": ["O", "O", None, "X", "X", None, None, None, None]}
        )
        response = await communicator.receive_json_from()
        self.assertEqual(response["chosenCell"], 2)
        self.assertEqual(response["moveAnalysis"][0]["strategy"], "winning_move")

        # each message is answered independently
        await communicator.send_json_to({})
        response = await communicator.receive_json_from()
        self.assertEqual(response["chosenCell"], 4)

        await communicator.disconnect()

    async def test_invalid_board_gets_error(self):
        communicator = WebsocketCommunicator(MoveConsumer.as_asgi(), "/ws/move/")
        await communicator.connect()
        await communicator.send_json_to({"boardState": ["X"]})
        response = await communicator.receive_json_from()
        self.assertIn("boardState", response["error"])
        await communicator.disconnect()

    async def test_full_board_and_bad_json(self):
        communicator = WebsocketCommunicator(MoveConsumer.as_asgi(), "/ws/move/")
        await communicator.connect()
        await communicator.send_json_to({"boardState": ["X", "O", "X", "X", "O", "O", "O", "X", "X"]})
        response = await communicator.receive_json_from()
        self.assertEqual(response, {"error": {"detail": "No legal move: board is full"}})

        await communicator.send_to(text_data="not json")
        response = await communicator.receive_json_from()
        self.assertEqual(response, {"error": {"detail": "Invalid JSON"}})
        await communicator.disconnect()

    async def test_routed_path(self):
        communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), "/ws/move/")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        await communicator.disconnect()
