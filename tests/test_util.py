from dialogtree import util, manager

def test_fullname():
    assert util.fullname(manager.DialogManager) == "dialogtree.manager.DialogManager"
    assert util.fullname(util.PDBManager()) == "dialogtree.util.PDBManager"
    assert util.fullname(3) == "int"

def test_elipsis():
    assert util.elipsis("short", 10) == "short"
    assert util.elipsis("a bit too long", 5) == "a bi…"
