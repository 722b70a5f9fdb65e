"""
NodeProperties 單元測試：已知屬性種類與 passthrough。
"""
from builders import solid
from figma2code.properties import Color, NodeProperties, format_number


def test_color_key_rounds_channels():
    assert Color(r=10 / 255, g=11 / 255, b=9 / 255).key() == "rgba(10,11,9,1)"
    assert Color(r=1, g=0.5, b=0, a=0.5).key() == "rgba(255,128,0,0.5)"


def test_format_number():
    assert format_number(16.0) == "16"
    assert format_number(12.5) == "12.5"


def test_geometry_from_bounding_box_or_size():
    props = NodeProperties.from_raw({"absoluteBoundingBox": {"width": 120, "height": 40}})
    assert (props.geometry.width, props.geometry.height) == (120, 40)
    props = NodeProperties.from_raw({"size": {"x": 10, "y": 20}})
    assert (props.geometry.width, props.geometry.height) == (10, 20)


def test_text_style_from_rest_style_object():
    props = NodeProperties.from_raw({
        "type": "TEXT",
        "characters": "Hi",
        "style": {"fontFamily": "Roboto", "fontSize": 18, "fontWeight": 700},
    })
    assert props.text.font_family == "Roboto"
    assert props.font_size == 18
    assert props.text.font_weight == 700


def test_auto_layout_activity():
    assert NodeProperties.from_raw({"layoutMode": "NONE"}).auto_layout.is_active is False
    auto = NodeProperties.from_raw({"layoutMode": "VERTICAL", "itemSpacing": 8, "paddingTop": 4}).auto_layout
    assert auto.is_active
    assert auto.spacing_values() == [8, 4]
    assert auto.padding() == {"top": 4, "right": 0, "bottom": 0, "left": 0}


def test_unknown_fields_kept_as_passthrough():
    props = NodeProperties.from_raw({"id": "1", "name": "x", "constraints": {"vertical": "TOP"}, "cornerRadius": 2})
    assert props.passthrough == {"constraints": {"vertical": "TOP"}}
    data = props.as_dict()
    assert data["constraints"] == {"vertical": "TOP"}
    assert data["cornerRadius"] == 2
    assert "width" not in data


def test_visible_paints_and_shadows():
    props = NodeProperties.from_raw({
        "fills": [solid(0, 0, 0), solid(1, 1, 1, visible=False)],
        "effects": [{"type": "INNER_SHADOW"}, {"type": "DROP_SHADOW", "radius": 6}],
    })
    assert len(props.visible_fills()) == 1
    assert [e.radius for e in props.drop_shadows()] == [6]
