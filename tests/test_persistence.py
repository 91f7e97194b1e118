"""
Tests for the CSV persistence layer

Tests save/load round trips, lenient loading with counted skips and I/O failures.
"""

import logging

import pytest

from studien_verwaltung.config import AppConfig
from studien_verwaltung.domain import Course, Grade, Semester, Student
from studien_verwaltung.persistence import CsvRecordRepository, FileStorage
from studien_verwaltung.result import ErrorKind


def write(config, name, text):
    config.ensure_data_dir()
    (config.data_dir / name).write_text(text, encoding="utf-8")


def snapshot(catalog):
    """(student, course, grade) tuples plus the plain student/course fields."""
    students = {(s.student_id, s.reg_no, s.full_name, s.email) for s in catalog.students.values()}
    courses = {
        (c.code, c.title, c.credits, c.semester, c.instructor.instructor_id if c.instructor else None)
        for c in catalog.courses.values()
    }
    enrollments = {(s.student_id, e.course_code, e.grade) for s, e in catalog.all_enrollments()}
    return students, courses, enrollments


class TestRoundTrip:
    """save() followed by load() reproduces the data"""

    def test_round_trip(self, config, populated, enrollments):
        enrollments.enroll("S101", "CS101")
        enrollments.enroll("S101", "MA101")
        enrollments.enroll("S102", "CS102")
        enrollments.record_grade("S101", "CS101", "A")
        enrollments.record_grade("S102", "CS102", "f")

        repo = CsvRecordRepository(config)
        assert repo.save(populated).ok

        loaded = CsvRecordRepository(config).load()
        assert loaded.errors == []
        assert loaded.total_skipped == 0
        assert snapshot(loaded.catalog) == snapshot(populated)

    def test_enrollment_order_preserved(self, config, populated, enrollments):
        enrollments.enroll("S101", "MA101")
        enrollments.enroll("S101", "CS101")
        CsvRecordRepository(config).save(populated)

        loaded = CsvRecordRepository(config).load().catalog
        assert [e.course_code for e in loaded.students["S101"].enrollments] == ["MA101", "CS101"]

    def test_enrollments_share_course_object(self, config, populated, enrollments):
        enrollments.enroll("S101", "CS101")
        enrollments.enroll("S102", "CS101")
        CsvRecordRepository(config).save(populated)

        loaded = CsvRecordRepository(config).load().catalog
        course = loaded.courses["CS101"]
        assert loaded.students["S101"].enrollments[0].course is course
        assert loaded.students["S102"].enrollments[0].course is course

    def test_commas_in_fields_survive(self, config, catalog, students, courses):
        students.add_student("S1", "R1", "Doe, John", "john@example.edu")
        courses.add_course("HI1", 'History, "Ancient"', 3, "SUMMER")
        CsvRecordRepository(config).save(catalog)

        loaded = CsvRecordRepository(config).load().catalog
        assert loaded.students["S1"].full_name == "Doe, John"
        assert loaded.courses["HI1"].title == 'History, "Ancient"'


class TestFileFormat:
    """Headers and field encoding"""

    def test_written_files(self, config, populated, enrollments):
        enrollments.enroll("S101", "CS101")
        enrollments.enroll("S101", "MA101")
        enrollments.record_grade("S101", "CS101", "B")
        CsvRecordRepository(config).save(populated)

        students = config.students_path.read_text(encoding="utf-8").splitlines()
        courses = config.courses_path.read_text(encoding="utf-8").splitlines()
        enrollment = config.enrollment_path.read_text(encoding="utf-8").splitlines()

        assert students[0] == "id,regNo,fullName,email"
        assert students[1] == "S101,R2024-101,Alice Example,alice@example.edu"
        assert courses[0] == "code,title,credits,instructorId,semester"
        assert "CS101,Intro to Programming,3,I001,FALL" in courses
        assert "CS102,Data Structures,18,N/A,SPRING" in courses
        assert enrollment == ["studentId,courseCode,grade", "S101,CS101,B", "S101,MA101,"]

    def test_save_overwrites(self, config, populated, students):
        repo = CsvRecordRepository(config)
        repo.save(populated)
        students.delete_student("S102")
        repo.save(populated)
        assert "S102" not in config.students_path.read_text(encoding="utf-8")


class TestLenientLoad:
    """Missing files, malformed rows and dangling references"""

    def test_missing_files_are_empty(self, config):
        result = CsvRecordRepository(config).load()
        assert result.catalog.students == {}
        assert result.catalog.courses == {}
        assert "I001" in result.catalog.instructors
        assert result.errors == []
        assert result.loaded == {"students": 0, "courses": 0, "enrollment": 0}

    def test_malformed_rows_skipped_and_counted(self, config, caplog):
        write(config, "students.csv", "id,regNo,fullName,email\nS1,R1,Ann,a@x\nS2,R2,too,many,fields\nbroken\n\n")
        write(
            config,
            "courses.csv",
            "code,title,credits,instructorId,semester\n"
            "C1,One,3,I001,FALL\n"
            "C2,Two,abc,N/A,FALL\n"
            "C3,Three,0,N/A,FALL\n"
            "C4,Four,3,N/A,WINTER\n"
            "C5,Five,2,N/A,N/A\n",
        )
        write(
            config,
            "enrollment.csv",
            "studentId,courseCode,grade\n"
            "S1,C1,a\n"
            "S9,C1,\n"
            "S1,C9,\n"
            "S1,C5,Z\n"
            "S1,C1,B\n",
        )

        with caplog.at_level(logging.WARNING):
            result = CsvRecordRepository(config).load()

        assert result.loaded == {"students": 1, "courses": 2, "enrollment": 1}
        assert result.skipped == {"students": 2, "courses": 3, "enrollment": 4}
        assert result.total_skipped == 9
        assert "unbekannter Student 'S9'" in caplog.text
        assert "unbekannter Kurs 'C9'" in caplog.text

        catalog = result.catalog
        assert catalog.courses["C5"].semester is None
        assert catalog.students["S1"].enrollments[0].grade is Grade.A

    def test_duplicate_student_rows_skipped(self, config):
        write(config, "students.csv", "id,regNo,fullName,email\nS1,R1,Ann,a@x\nS1,R2,Bob,b@x\nS3,R1,Cid,c@x\n")
        result = CsvRecordRepository(config).load()
        assert list(result.catalog.students) == ["S1"]
        assert result.skipped["students"] == 2

    def test_unknown_instructor_loads_without_instructor(self, config, caplog):
        write(config, "courses.csv", "code,title,credits,instructorId,semester\nC1,One,3,I777,spring\n")
        with caplog.at_level(logging.WARNING):
            result = CsvRecordRepository(config).load()
        course = result.catalog.courses["C1"]
        assert course.instructor is None
        assert course.semester is Semester.SPRING
        assert "I777" in caplog.text

    def test_read_failure_is_reported_and_load_continues(self, config):
        write(config, "students.csv", "id,regNo,fullName,email\nS1,R1,Ann,a@x\n")
        write(config, "courses.csv", "code,title,credits,instructorId,semester\nC1,One,3,N/A,FALL\n")

        class FailingCourses(FileStorage):
            def read_text(self, pfad):
                if pfad.name == "courses.csv":
                    raise PermissionError("no access")
                return super().read_text(pfad)

        result = CsvRecordRepository(config, storage=FailingCourses()).load()
        assert len(result.errors) == 1
        assert "courses.csv" in result.errors[0]
        assert "S1" in result.catalog.students
        assert result.catalog.courses == {}


class TestSaveFailure:
    """I/O failures during save do not raise"""

    def test_save_into_file_path_fails(self, tmp_path, catalog, caplog):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        config = AppConfig(data_dir=blocker)

        with caplog.at_level(logging.ERROR):
            result = CsvRecordRepository(config).save(catalog)

        assert not result.ok
        assert result.kind is ErrorKind.IO_FAILURE
        assert "Speichern fehlgeschlagen" in caplog.text


class TestEncodingAndWhitespace:
    """Non-UTF-8 files and significant whitespace in text fields"""

    def test_latin1_file_reported_and_load_continues(self, config, caplog):
        config.ensure_data_dir()
        config.students_path.write_bytes("id,regNo,fullName,email\nS1,R1,J\xfcrgen,j@x\n".encode("latin-1"))
        write(config, "courses.csv", "code,title,credits,instructorId,semester\nC1,One,3,N/A,FALL\n")

        with caplog.at_level(logging.ERROR):
            result = CsvRecordRepository(config).load()

        assert len(result.errors) == 1
        assert "students.csv" in result.errors[0]
        assert "UTF-8" in result.errors[0]
        assert result.catalog.students == {}
        assert list(result.catalog.courses) == ["C1"]

    def test_read_text_raises_oserror_for_invalid_utf8(self, tmp_path):
        pfad = tmp_path / "latin1.csv"
        pfad.write_bytes("M\xfcller".encode("latin-1"))
        with pytest.raises(OSError):
            FileStorage().read_text(pfad)

    def test_quoted_spaces_in_names_survive(self, config, catalog):
        catalog.students["S1"] = Student("S1", "R1", "  Ann  ", "a@x")
        catalog.courses["C1"] = Course("C1", " Padded Title ", 3)
        CsvRecordRepository(config).save(catalog)

        loaded = CsvRecordRepository(config).load().catalog
        assert loaded.students["S1"].full_name == "  Ann  "
        assert loaded.courses["C1"].title == " Padded Title "

    def test_identifier_fields_are_trimmed(self, config):
        write(config, "students.csv", "id,regNo,fullName,email\n S1 , R1 ,Ann, a@x \n")
        write(config, "courses.csv", "code,title,credits,instructorId,semester\n C1 ,One, 3 , I001 , fall \n")
        write(config, "enrollment.csv", "studentId,courseCode,grade\n S1 , C1 , a \n")

        catalog = CsvRecordRepository(config).load().catalog

        assert catalog.students["S1"].email == "a@x"
        course = catalog.courses["C1"]
        assert (course.credits, course.semester) == (3, Semester.FALL)
        assert course.instructor.instructor_id == "I001"
        assert catalog.students["S1"].enrollments[0].grade is Grade.A
