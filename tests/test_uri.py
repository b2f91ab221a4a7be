from bounty.utils.uri import decode, encode


def test_encode_keeps_alphanumerics():
	assert encode("abcXYZ019") == "abcXYZ019"


def test_encode_escapes_everything_else():
	assert encode("a.txt") == "a%2Etxt"
	assert encode("a b/c") == "a%20b%2Fc"
	assert encode("100%") == "100%25"
	assert encode("-_~") == "%2D%5F%7E"


def test_encode_works_on_utf8_bytes():
	assert encode("é") == "%C3%A9"
	assert encode("日") == "%E6%97%A5"


def test_encode_keeps_undecodable_bytes():
	# A file name with a latin-1 byte, as given by the filesystem
	name = b"caf\xe9".decode("utf8", "surrogateescape")
	assert encode(name) == "caf%E9"


def test_round_trip():
	for text in [
		"",
		"plain",
		"with space",
		"a.b-c_d~e",
		"100%",
		"%41 is not decoded twice",
		"日本語のファイル.txt",
		"emoji 🚀 rocket",
		"quotes \" and ' and <tags>",
	]:
		assert decode(encode(text)) == text


def test_decode():
	assert decode("a%20b") == "a b"
	assert decode("a%2Fb") == "a/b"
	assert decode("%E6%97%A5") == "日"
	assert decode("/plain/path") == "/plain/path"


def test_decode_passes_malformed_escapes_through():
	assert decode("%") == "%"
	assert decode("%4") == "%4"
	assert decode("%zz") == "%zz"
	assert decode("100%") == "100%"
	assert decode("%%41") == "%A"


def test_decode_is_lossy_on_invalid_utf8():
	assert decode("%FF") == "�"
	assert decode("a%C3") == "a�"


# EOF
