from factor_reports.domain.messages import MessageKind
from factor_reports.domain.repositories import MessageRepository
from factor_reports.infrastructure.parsing.utils import decode_text
from factor_reports.infrastructure.parsing.xml_messages import decode_document
from factor_reports.infrastructure.repositories.document_repositories import XmlMessageSource


def decode_all(xml_builder, *messages):
    return list(decode_document(decode_text(xml_builder.document(*messages)), "batch.xml").messages)


def test_latest_seller_agreement_wins(xml_builder):
    repository = MessageRepository()
    first, second = decode_all(
        xml_builder,
        xml_builder.msg01(business_product="Old product"),
        xml_builder.msg01(business_product="New product"),
    )
    repository.register(first)
    repository.register(second)

    found = repository.lookup_seller("F1", "S9")

    assert found is second
    assert len(repository.all(MessageKind.SELLER_AGREEMENT)) == 1


def test_lookup_misses_on_other_sender(xml_builder):
    repository = MessageRepository()
    for message in decode_all(xml_builder, xml_builder.msg01()):
        repository.register(message)

    assert repository.lookup_seller("F2", "S9") is None
    assert repository.lookup_seller("F1", "S10") is None


def test_transactional_iterates_kinds_in_order(xml_builder):
    repository = MessageRepository()
    for message in decode_all(
        xml_builder,
        xml_builder.msg07(),
        xml_builder.msg05(sequence_nr="1"),
        xml_builder.msg02(),
        xml_builder.msg05(sequence_nr="2"),
        xml_builder.msg01(),
    ):
        repository.register(message)

    kinds = [m.kind.value for m in repository.transactional()]

    assert kinds == ["MSG02", "MSG05", "MSG05", "MSG07"]
    assert [str(m.msg_info.sequence_nr) for m in repository.all(MessageKind.CREDIT_COVER_REQUEST)] == ["1", "2"]
    assert len(repository) == 5


def test_clear_resets_everything(xml_builder):
    repository = MessageRepository()
    for message in decode_all(xml_builder, xml_builder.msg01(), xml_builder.msg02()):
        repository.register(message)

    repository.clear()

    assert len(repository) == 0
    assert repository.lookup_seller("F1", "S9") is None
    assert list(repository.transactional()) == []


def test_xml_source_lists_messages_and_skipped_items(xml_builder):
    broken = xml_builder.msg05().replace("<Buyer>", "<Other>").replace("</Buyer>", "</Other>")
    source = XmlMessageSource(xml_builder.document(xml_builder.msg02(), broken), name="batch.xml")

    assert [message.kind for message in source.list_messages()] == [MessageKind.CREDIT_ASSESSMENT_REQUEST]
    assert [item.kind for item in source.skipped] == ["MSG05"]
