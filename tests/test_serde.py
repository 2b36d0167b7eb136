import pytest

from typedini import (
    BoolDeserializer,
    BoolSerializer,
    CastNotAllowed,
    DeserializerMode,
    F32Deserializer,
    F32Serializer,
    F64Deserializer,
    FloatSerializer,
    I8Deserializer,
    I32Deserializer,
    I32Serializer,
    IntDeserializer,
    InvalidNodeValue,
    ListDeserializer,
    ListSerializer,
    NoConverterFound,
    StringDeserializer,
    U8Deserializer,
    U8Serializer,
    U32Deserializer,
    U64Deserializer,
    check_cast,
    deserializer_for,
    f32,
    i32,
    serializer_for,
    u8,
    u32,
)


def test_mode_flags() -> None:
    assert StringDeserializer().mode is DeserializerMode.NONE
    trimming = StringDeserializer(DeserializerMode.TRIM)
    assert trimming.has_mode(DeserializerMode.TRIM)
    assert not StringDeserializer().has_mode(DeserializerMode.TRIM)


def test_string_deserializer_modes() -> None:
    assert StringDeserializer()('  value ') == '  value '
    assert StringDeserializer(DeserializerMode.TRIM)('  value ') == 'value'


def test_integer_deserializers() -> None:
    assert I32Deserializer()('10') == 10
    assert I32Deserializer()('-10') == -10
    assert I32Deserializer()('   320  ') == 320
    assert isinstance(I32Deserializer()('1'), i32)


def test_narrowing_wraps_around() -> None:
    assert U8Deserializer()('256') == 0
    assert U8Deserializer()('-1') == 255
    assert I8Deserializer()('200') == -56
    assert I32Deserializer()('2147483648') == -2147483648
    assert U64Deserializer()('18446744073709551616') == 0


def test_float_deserializers() -> None:
    assert F32Deserializer()('2.5') == 2.5
    assert F64Deserializer()('-1e3') == -1000.0
    assert F32Deserializer()('0.1') != 0.1  # rounded to single precision
    assert F32Deserializer()('0.1') == f32.narrow(0.1)


@pytest.mark.parametrize('text', [
    '', 'abc', '10abc', '1_000', '2.5', '\u0663', '\uff11\uff12',
])
def test_invalid_integers(text: str) -> None:
    with pytest.raises(InvalidNodeValue):
        I32Deserializer()(text)


@pytest.mark.parametrize('text', ['two', '\u0661.\u0665', '1,5', '\u00a02.5'])
def test_invalid_float(text: str) -> None:
    with pytest.raises(ValueError):
        F64Deserializer()(text)


def test_non_ascii_digits_rejected_by_fixed_widths() -> None:
    with pytest.raises(InvalidNodeValue):
        U8Deserializer()('\uff11\uff12')
    with pytest.raises(InvalidNodeValue):
        F32Deserializer()('\u0662.\u0665')


def test_number_serializers() -> None:
    assert I32Serializer()(i32(-20)) == '-20'
    assert U8Serializer()(300) == '44'
    assert F32Serializer()(2.5) == '2.5'
    assert FloatSerializer()(0.25) == '0.25'


def test_number_round_trip() -> None:
    for value in (0, 1, -1, 2 ** 31 - 1, -2 ** 31):
        assert I32Deserializer()(I32Serializer()(value)) == value
    for value in (0.1, 3.4e38, -2.5):
        expected = f32.narrow(value)
        assert F32Deserializer()(F32Serializer()(value)) == expected


def test_bool_converters() -> None:
    assert BoolDeserializer()(' yes') is True
    assert BoolDeserializer()('True') is True
    assert BoolDeserializer()('1') is True
    assert BoolDeserializer()('false') is False
    assert BoolDeserializer()('No') is False
    assert BoolSerializer()(True) == 'true'
    assert BoolSerializer()(False) == 'false'
    with pytest.raises(InvalidNodeValue):
        BoolDeserializer()('maybe')


def test_list_converters() -> None:
    assert ListDeserializer()(' a, b ,c') == ['a', 'b', 'c']
    assert ListDeserializer(item=I32Deserializer())('1, 2,3') == [1, 2, 3]
    assert ListSerializer()(['a', 1, True]) == 'a,1,true'
    assert ListSerializer(I32Serializer())([1, 2]) == '1,2'


def test_registries() -> None:
    assert serializer_for(u8) is U8Serializer
    assert serializer_for(bool) is BoolSerializer
    assert deserializer_for(u32) is U32Deserializer
    assert deserializer_for(int) is IntDeserializer
    assert deserializer_for(str) is StringDeserializer
    with pytest.raises(NoConverterFound):
        deserializer_for(dict)
    with pytest.raises(NoConverterFound):
        serializer_for(object)


def test_serializer_lookup_follows_subclasses() -> None:
    class Label(str):
        pass

    assert serializer_for(Label) is serializer_for(str)


def test_check_cast() -> None:
    check_cast(U8Deserializer, u8)
    check_cast(StringDeserializer(), int)
    with pytest.raises(CastNotAllowed):
        check_cast(U8Deserializer(), int)
    with pytest.raises(TypeError):
        check_cast(I32Deserializer, float)
