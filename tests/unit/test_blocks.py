"""
Unit tests for splitting exports into tournament blocks
"""

from tournament_results.blocks import DELIMITER, TournamentBlocks, split_blocks


FIRST = "Tournament #1, Alpha, Hold'em No Limit\nBuy-in: $1\n10 Players\n"
SECOND = "\nTournament #2, Beta, Hold'em No Limit\nBuy-in: $2\n20 Players\n"
THIRD = "\nTournament #3, Gamma, Hold'em No Limit\nBuy-in: $3\n30 Players"


class TestTournamentBlocks:
    """Tests for TournamentBlocks"""

    def test_split_on_delimiter_lines(self):
        text = FIRST + DELIMITER + SECOND + DELIMITER + THIRD

        assert list(split_blocks(text)) == [FIRST, SECOND, THIRD]

    def test_rejoin_reproduces_text(self):
        """Test blocks joined with the delimiter give back the original"""
        text = FIRST + DELIMITER + SECOND + DELIMITER + THIRD

        assert DELIMITER.join(split_blocks(text)) == text

    def test_no_delimiter_is_one_block(self):
        assert list(split_blocks(FIRST)) == [FIRST]

    def test_empty_input(self):
        assert list(split_blocks("")) == []
        assert list(split_blocks(None)) == []
        assert list(split_blocks("  \n\t\n")) == []

    def test_blank_segments_are_dropped(self):
        """Test leading, repeated and trailing delimiters"""
        text = DELIMITER + "\n" + FIRST + DELIMITER + "\n\n" + DELIMITER + SECOND + DELIMITER + "\n"

        assert list(split_blocks(text)) == ["\n" + FIRST, SECOND]

    def test_longer_delimiter_lines(self):
        text = FIRST + "----------" + SECOND + "-----  " + THIRD

        assert list(split_blocks(text)) == [FIRST, SECOND, THIRD]

    def test_hyphens_inside_a_line_do_not_split(self):
        text = "Tournament #1, A ---- B, Hold'em No Limit\n---\nBuy-in: $1"

        assert list(split_blocks(text)) == [text]

    def test_windows_line_endings(self):
        text = "Tournament #1\r\n----\r\nTournament #2\r\n"

        assert [b.strip() for b in split_blocks(text)] == ["Tournament #1", "Tournament #2"]

    def test_restartable(self):
        """Test iterating twice gives the same blocks"""
        blocks = TournamentBlocks(FIRST + DELIMITER + SECOND)

        assert list(blocks) == list(blocks)
        assert len(list(blocks)) == 2

    def test_lazy(self):
        """Test blocks are produced on demand"""
        blocks = iter(TournamentBlocks(FIRST + DELIMITER + SECOND))

        assert next(blocks) == FIRST
        assert next(blocks) == SECOND
