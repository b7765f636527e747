from xostools.xsm.tokenizer import Token, Tokenizer, TokenType, tokenize


def test_register_and_number_operands():
    assert list(tokenize("MOV R0, 5")) == [
        Token(TokenType.INSTRUCTION, "MOV"),
        Token(TokenType.REGISTER, "R0"),
        Token(TokenType.COMMA, ","),
        Token(TokenType.NUMBER, 5),
    ]


def test_dereference_brackets():
    types = [token.type for token in tokenize("MOV [SP], R1")]
    assert types == [
        TokenType.INSTRUCTION,
        TokenType.DREF_L,
        TokenType.REGISTER,
        TokenType.DREF_R,
        TokenType.COMMA,
        TokenType.REGISTER,
    ]


def test_string_literal_loses_quotes():
    tokens = list(tokenize('MOV R0, "hello"'))
    assert tokens[-1] == Token(TokenType.STRING, "hello")


def test_register_names_ignore_case():
    tokens = list(tokenize("INR r5"))
    assert tokens[1] == Token(TokenType.REGISTER, "r5")


def test_negative_number():
    assert list(tokenize("-12")) == [Token(TokenType.NUMBER, -12)]


def test_other_words_are_instructions():
    tokens = list(tokenize("JMP loop"))
    assert [t.type for t in tokens] == [TokenType.INSTRUCTION, TokenType.INSTRUCTION]


def test_unknown_character_is_error_token():
    assert list(tokenize("$")) == [Token(TokenType.ERROR, "$")]


def test_trailing_whitespace_is_ignored():
    assert list(tokenize("HALT    ")) == [Token(TokenType.INSTRUCTION, "HALT")]


def test_peek_does_not_consume():
    tokens = Tokenizer("PUSH R3")
    first = tokens.peek()
    assert tokens.peek() == first
    assert tokens.next() == first
    assert tokens.next() == Token(TokenType.REGISTER, "R3")


def test_end_after_exhaustion():
    tokens = Tokenizer("RET")
    tokens.next()
    assert tokens.next().type is TokenType.END
    assert tokens.peek().type is TokenType.END
    assert tokens.next().type is TokenType.END


def test_skip_consumes_one_token():
    tokens = Tokenizer("ADD R1, R2")
    assert tokens.skip() == Token(TokenType.INSTRUCTION, "ADD")
    tokens.skip()
    assert tokens.next().type is TokenType.COMMA