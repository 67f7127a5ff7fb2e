from rest_framework import serializers

from .ai.board import AI, BOARD_CELLS, EMPTY, HUMAN, Board, normalize_board
from .ai.quantum_engine import AnalysisResult


class BoardStateSerializer(serializers.Serializer):
    """
    Request body for POST /api/move and the ws/move/ socket.
    boardState is optional: absent or null means an empty board.
    """
    boardState = serializers.ListField(
        child=serializers.CharField(allow_null=True, allow_blank=True, trim_whitespace=False),
        min_length=BOARD_CELLS,
        max_length=BOARD_CELLS,
        required=False,
        allow_null=True,
    )

    def validate_boardState(self, value):
        if value is None:
            return None
        bad = [idx for idx, cell in enumerate(value) if cell not in (None, EMPTY, HUMAN, AI)]
        if bad:
            raise serializers.ValidationError(
                f"Cells must be null, 'X' or 'O' (invalid at index {bad[0]})."
            )
        return value

    def to_board(self) -> Board:
        return normalize_board(self.validated_data.get("boardState"))


class MoveAnalysisSerializer(serializers.Serializer):
    cellIndex = serializers.IntegerField(source="cell_index")
    score = serializers.FloatField()
    entropy = serializers.FloatField(allow_null=True)
    purity = serializers.FloatField(allow_null=True)
    strategy = serializers.CharField()


class RawQuantumResultSerializer(serializers.Serializer):
    measured = serializers.CharField()
    classicalRegister = serializers.IntegerField(source="classical_register")
    probabilities = serializers.ListField(child=serializers.FloatField())
    entropy = serializers.CharField()
    purity = serializers.CharField()
    quantumState = serializers.CharField(source="quantum_state")


class MoveResponseSerializer(serializers.Serializer):
    chosenCell = serializers.IntegerField(source="chosen_cell")
    moveAnalysis = MoveAnalysisSerializer(source="ranked_candidates", many=True)
    symbol = serializers.CharField()
    rawQuantumResult = RawQuantumResultSerializer(source="feature_summary")


def analysis_payload(result: AnalysisResult) -> dict:
    return MoveResponseSerializer(result).data
