from cleaner.domain.identifier import encode_html_entities, parse_identifier, parse_record


def test_parse_full_key_keeps_extra_parts():
    identifier = parse_identifier("PicklistValue.Queue_Share__c.Related_Object.Complaint Analysis")
    assert identifier.type == "PicklistValue"
    assert identifier.object == "Queue_Share__c"
    assert identifier.element == "Related_Object"
    assert identifier.extra == ("Complaint Analysis",)


def test_parse_short_key_pads_with_empty_strings():
    identifier = parse_identifier("CustomLabel")
    assert identifier.type == "CustomLabel"
    assert identifier.object == ""
    assert identifier.element == ""
    assert identifier.extra == ()


def test_parse_empty_key_never_raises():
    identifier = parse_identifier("")
    assert identifier.type == ""


def test_flow_key_positions():
    identifier = parse_identifier(
        "Flow.Flow.New_OCSD_Order_Request.1.New_OCSD_Order_Request.Field.Status.FieldLabel"
    )
    assert identifier.element == "New_OCSD_Order_Request"
    assert identifier.extra[1] == "New_OCSD_Order_Request"
    assert identifier.extra[2] == "Field"
    assert identifier.extra[3] == "Status"


def test_encode_html_entities():
    assert encode_html_entities("A & B <c> 'd' \"e\"") == "A &amp; B &lt;c&gt; &#39;d&#39; &quot;e&quot;"


def test_parse_record_splits_translation_columns():
    line = "CustomField.Account.Region.FieldLabel\tRegion\tRegión\t-"
    record = parse_record(7, line)

    assert record.line_no == 7
    assert record.raw_line == line
    assert record.key == "CustomField.Account.Region.FieldLabel"
    assert record.identifier.element == "Region"
    assert record.translation_columns == ("Region", "Región", "-")


def test_parse_record_without_columns():
    record = parse_record(1, "CustomLabel.Greeting")
    assert record.key == "CustomLabel.Greeting"
    assert record.translation_columns == ()
