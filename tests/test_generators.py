from fmw2.templates import TemplateService

svc = TemplateService()


def test_off_awarded(today):
    text = svc.render(
        "offAwarded",
        {
            "rank": "3SG",
            "name": "muthu",
            "offAwardReason": "Weekend tasking",
            "startDate": "2025-05-31",
            "endDate": "2025-06-01",
            "balance": "2",
            "recommendedBy": "ME3 Alex",
        },
        today,
    ).text
    assert text == (
        "• Rank/Name: 3SG MUTHU\n"
        "• Reason for Accumulation: Weekend tasking\n"
        "• Dates Accumulated: 31 May to 1 June\n"
        "• Balance (After Accumulation): 2\n"
        "• Recommended By: ME3 Alex"
    )


def test_off_application_half_day(today, off_values):
    off_values.update(isHalfDay="true", timeOff="AM", endDate="2025-06-03")
    result = svc.render("offTemplate", off_values, today)
    assert result.template == "offTemplate"
    assert result.template_type == "Leave/Off Application Template"
    assert result.text.splitlines() == [
        "• Rank/Name: CPL TAN AH KOW",
        "• Type: Leave",
        "• Dates: 3 June [AM]",
        "• Balance Left: 4.5",
        "• Recommended By: ME3 Alex",
    ]
    assert result.fields["isHalfDay"] == "true"


def _sick(**overrides):
    values = {
        "newStatus": "NEW",
        "rank": "LCP",
        "name": "lim",
        "location": "Sungei Gedong Medical Centre",
        "typeSick": "RSI",
        "dateIncident": "2025-06-03",
        "startTimeIncident": "0830",
        "reasonSick": "fever",
        "recommendedBy": "ME3 Alex",
    }
    values.update(overrides)
    return values


def test_report_sick_new(today):
    text = svc.render("reportSick", _sick(), today).text
    assert text.startswith("*NEW*\n\nRSI/RSO/MA Reporting Template\n")
    assert "2. Date & Time of Incident:\n030625/ 0830hrs" in text
    assert "3. Serviceman/Woman Involved: Rank/Name: LCP LIM" in text
    assert "4. Serviceman/woman Unit/ Company Unit:\n1AMB/ 11FMD/ FMW2" in text
    assert "5. Location: Sungei Gedong Medical Centre" in text
    assert "6. Details of Incident:\nAt 030625 around 0830hrs, serviceman went to RSI at SGMC for FEVER.\n\n7." in text
    assert text.endswith("12. Reporting Person: ME3 Alex")


def test_report_sick_updated_adds_status_line(today):
    values = _sick(
        newStatus="UPDATED",
        endTimeIncident="1100",
        sickStatus="MC",
        dayStatus="2",
        mcRefNo="12345",
    )
    text = svc.render("reportSick", values, today).text
    assert text.startswith("*UPDATED*")
    assert (
        "At around 1100hrs, serviceman was given 2 day MC from 030625 to 040625. Ref No.: 12345\n\n7."
        in text
    )


def test_report_sick_other_location_is_kept_verbatim(today):
    text = svc.render("reportSick", _sick(location="Kranji Medical Centre"), today).text
    assert "at Kranji Medical Centre for FEVER." in text


def test_hull_bos_present(today):
    values = {
        "mid": "12345",
        "vehiclePresent": True,
        "vehicleLocation": "MSVS Level 2",
        "bosDate": "2025-06-03",
        "bosTime": "0930",
        "odo": "1234.5",
        "eh": "321",
        "auxPercent": "80",
        "auxVolt": "24.5",
        "starterPercent": "90",
        "starterVolt": "25.1",
        "fuelPercent": "75",
        "fuelLitre": "300",
        "afesExpiry": "01/2030",
        "faults": "Horn faulty\n\n  Wiper loose  ",
    }
    text = svc.render("hullBOS", values, today).text
    assert text == (
        "MID 12345✅\n"
        "📍 MSVS Level 2\n"
        "📅 03/06/25 🕚 0930hrs\n"
        "ODO: 1234.5km | EH: 321hrs\n"
        "🔋 AUX: 80% 24.5V | STARTER: 90% 25.1V\n"
        "⛽️ FUEL: 75% 300L\n"
        "🔥 AFES EXPIRY: 01/2030\n"
        "🛠️ Faults:\n"
        "• Horn faulty\n"
        "• Wiper loose"
    )

    values["faults"] = ""
    assert svc.render("hullBOS", values, today).text.endswith("🛠️ Faults: NIL")


def test_hull_bos_absent(today):
    values = {
        "mid": "54321",
        "vehiclePresent": "false",
        "vehicleStatus": "Workshop",
        "vehicleLocation": "MSVS Level 2",
    }
    text = svc.render("hullBOS", values, today).text
    lines = text.splitlines()
    assert lines[0] == "MID 54321⏳ (Workshop)"
    assert lines[1] == "📍 MSVS Level 2"
    assert lines[-2:] == ["🛠️ Faults:", "• [Fault Description]"]
    assert "ODO: [xx] | EH: [xx]" in lines


def test_night_strength_template(today):
    values = {
        "rank": "CPL",
        "name": "tan",
        "psNightStrength": "STAYIN: 40\nSTAYOUT: 5\nOS: 2\nOTHERS: 1\nRSO: 0\nRSI: 1",
        "blk210": "30",
    }
    text = svc.render("nightStrength", values, today).text
    assert text.startswith("11FMD NIGHT STRENGTH 03/06/2025 BY CPL TAN\n\n")
    assert text.endswith("STAYIN DETAILS\nBLK210: 30\nBLK420: 10")
